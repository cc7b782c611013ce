"""
Test suite for Catalog module
Tests: Product CRUD, validation, list filters, low stock
"""
from decimal import Decimal
from django.test import TestCase, override_settings
from rest_framework import status
from rest_framework.test import APIClient
from backend.core.test_utils import TestDataFactory
from backend.catalog.models import Product


class ProductModelTests(TestCase):
    """Test Product model methods"""

    def test_product_str(self):
        """Test product string representation"""
        product = TestDataFactory.create_product(name='Turmeric Powder', category='Spices & Masalas')
        self.assertEqual(str(product), 'Turmeric Powder (Spices & Masalas)')

    def test_is_low_stock(self):
        """Test low stock check against a threshold"""
        product = TestDataFactory.create_product(units=9)
        self.assertTrue(product.is_low_stock(10))
        product.units = 10
        self.assertFalse(product.is_low_stock(10))

    def test_default_weight_unit(self):
        """Test weight unit defaults to kg"""
        product = Product.objects.create(
            name='Basmati Rice', units=20, weight=Decimal('5'), price=Decimal('450.00'),
            category='Rice, Dal & Grains'
        )
        self.assertEqual(product.weight_unit, 'kg')


class ProductAPITests(TestCase):
    """Test product endpoints"""

    def setUp(self):
        self.client = APIClient()
        self.payload = {
            'name': 'Masala Chai',
            'units': 40,
            'weight': 250,
            'weightUnit': 'gram',
            'price': 120.5,
            'category': 'Beverages',
            'description': 'Assam tea with spices',
        }

    def test_create_product(self):
        """Test creating a product returns 201 with the stored fields"""
        response = self.client.post('/api/products', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.json()
        self.assertIn('id', data)
        self.assertEqual(data['name'], 'Masala Chai')
        self.assertEqual(data['units'], 40)
        self.assertEqual(data['weightUnit'], 'gram')
        self.assertEqual(Decimal(str(data['price'])), Decimal('120.50'))
        self.assertIn('createdAt', data)
        self.assertIn('updatedAt', data)
        self.assertEqual(Product.objects.count(), 1)

    def test_create_product_trailing_slash(self):
        """Test the collection URL accepts a trailing slash"""
        response = self.client.post('/api/products/', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_create_product_weight_unit_defaults_to_kg(self):
        """Test weightUnit is optional"""
        del self.payload['weightUnit']
        response = self.client.post('/api/products', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.json()['weightUnit'], 'kg')

    def test_create_product_missing_name(self):
        """Test a product without a name is rejected"""
        del self.payload['name']
        response = self.client.post('/api/products', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('message', response.json())
        self.assertIn('name', response.json()['errors'])
        self.assertEqual(Product.objects.count(), 0)

    def test_create_product_invalid_category(self):
        """Test an unknown category is rejected"""
        self.payload['category'] = 'Electronics'
        response = self.client.post('/api/products', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(response.json()['message'].startswith('category'))

    def test_create_product_invalid_weight_unit(self):
        """Test weightUnit must be kg or gram"""
        self.payload['weightUnit'] = 'litre'
        response = self.client.post('/api/products', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_product_negative_values(self):
        """Test negative units and price are rejected"""
        for field in ('units', 'price', 'weight'):
            payload = dict(self.payload, **{field: -1})
            response = self.client.post('/api/products', payload, format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, field)
        self.assertEqual(Product.objects.count(), 0)

    def test_list_products_newest_first(self):
        """Test product list is ordered newest first"""
        first = TestDataFactory.create_product(name='First')
        second = TestDataFactory.create_product(name='Second')
        response = self.client.get('/api/products')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        ids = [item['id'] for item in response.json()]
        self.assertEqual(ids, [second.id, first.id])

    def test_list_products_empty(self):
        """Test empty catalog returns an empty list"""
        response = self.client.get('/api/products')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), [])

    def test_search_products(self):
        """Test search matches name or category case-insensitively"""
        TestDataFactory.create_product(name='Garam Masala', category='Spices & Masalas')
        TestDataFactory.create_product(name='Toor Dal', category='Rice, Dal & Grains')
        TestDataFactory.create_product(name='Dish Soap', category='Household Items')

        response = self.client.get('/api/products', {'search': 'masala'})
        self.assertEqual([item['name'] for item in response.json()], ['Garam Masala'])

        response = self.client.get('/api/products', {'search': 'DAL'})
        self.assertEqual([item['name'] for item in response.json()], ['Toor Dal'])

    def test_filter_by_category(self):
        """Test exact category filter"""
        TestDataFactory.create_product(name='Cola', category='Beverages')
        TestDataFactory.create_product(name='Cookies', category='Snacks & Biscuits')
        response = self.client.get('/api/products', {'category': 'Snacks & Biscuits'})
        self.assertEqual([item['name'] for item in response.json()], ['Cookies'])

    def test_filter_low_stock(self):
        """Test lowStock filter uses the configured threshold"""
        TestDataFactory.create_product(name='Almost Out', units=3)
        TestDataFactory.create_product(name='Plenty', units=10)

        response = self.client.get('/api/products', {'lowStock': 'true'})
        self.assertEqual([item['name'] for item in response.json()], ['Almost Out'])

        response = self.client.get('/api/products', {'lowStock': 'false'})
        self.assertEqual([item['name'] for item in response.json()], ['Plenty'])

    @override_settings(LOW_STOCK_THRESHOLD=20)
    def test_filter_low_stock_custom_threshold(self):
        """Test lowStock follows LOW_STOCK_THRESHOLD"""
        TestDataFactory.create_product(name='Fifteen', units=15)
        response = self.client.get('/api/products', {'lowStock': 'true'})
        self.assertEqual(len(response.json()), 1)

    def test_get_product(self):
        """Test retrieving a single product"""
        product = TestDataFactory.create_product(name='Ghee')
        response = self.client.get(f'/api/products/{product.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['name'], 'Ghee')

    def test_get_product_not_found(self):
        """Test unknown product id returns 404 with a message"""
        response = self.client.get('/api/products/9999')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json(), {'message': 'Product not found'})

    def test_update_product_partial(self):
        """Test PUT only changes the provided fields"""
        product = TestDataFactory.create_product(name='Soap', units=5, price=Decimal('30.00'))
        response = self.client.put(f'/api/products/{product.id}', {'units': 25}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        product.refresh_from_db()
        self.assertEqual(product.units, 25)
        self.assertEqual(product.name, 'Soap')
        self.assertEqual(product.price, Decimal('30.00'))

    def test_patch_product(self):
        """Test PATCH behaves like PUT"""
        product = TestDataFactory.create_product(name='Soap')
        response = self.client.patch(f'/api/products/{product.id}', {'name': 'Bath Soap'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['name'], 'Bath Soap')

    def test_update_product_invalid(self):
        """Test invalid update leaves the product unchanged"""
        product = TestDataFactory.create_product(units=5)
        response = self.client.put(f'/api/products/{product.id}', {'units': -5}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        product.refresh_from_db()
        self.assertEqual(product.units, 5)

    def test_update_product_not_found(self):
        """Test updating an unknown product returns 404"""
        response = self.client.put('/api/products/9999', {'units': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_product(self):
        """Test deleting a product"""
        product = TestDataFactory.create_product()
        response = self.client.delete(f'/api/products/{product.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), {'message': 'Product deleted successfully'})
        self.assertFalse(Product.objects.filter(id=product.id).exists())

    def test_delete_product_not_found(self):
        """Test deleting an unknown product returns 404"""
        response = self.client.delete('/api/products/9999')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json()['message'], 'Product not found')

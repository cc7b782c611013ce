"""
Test suite for Billing module
Tests: Bill checkout, numbering, stock decrement, updates, deletes, filters and edge cases
"""
from decimal import Decimal
from io import StringIO
from unittest import mock
from django.core.management import call_command
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient
from backend.core.test_utils import TestDataFactory
from backend.billing.models import Bill, BillItem, BillSequence
from backend.billing.utils import format_bill_number, parse_bill_number, next_bill_number
from backend.catalog.models import Product


class BillModelTests(TestCase):
    """Test Bill and BillItem model methods"""

    def setUp(self):
        self.product = TestDataFactory.create_product(units=20)

    def test_bill_str(self):
        """Test bill string representation"""
        bill = TestDataFactory.create_bill(bill_number='BILL-000042')
        self.assertEqual(str(bill), 'BILL-000042')

    def test_items_total(self):
        """Test items total sums line totals"""
        bill = TestDataFactory.create_bill(items=[
            (self.product, 2, Decimal('50.00')),
            (self.product, 1, Decimal('30.00')),
        ])
        self.assertEqual(bill.get_items_total(), Decimal('130.00'))
        self.assertEqual(bill.total_amount, Decimal('130.00'))

    def test_line_total(self):
        """Test line total is quantity times unit price"""
        bill = TestDataFactory.create_bill(items=[(self.product, 3, Decimal('12.50'))])
        item = bill.items.get()
        self.assertEqual(item.get_line_total(), Decimal('37.50'))

    def test_product_delete_keeps_bill_item(self):
        """Test deleting a product nulls the reference but keeps the line"""
        name = self.product.name
        bill = TestDataFactory.create_bill(items=[(self.product, 1, Decimal('10.00'))])
        self.product.delete()
        item = bill.items.get()
        self.assertIsNone(item.product)
        self.assertEqual(item.product_name, name)


class BillNumberTests(TestCase):
    """Test bill number formatting and the durable counter"""

    def test_format_bill_number(self):
        """Test bill numbers are zero padded to six digits"""
        self.assertEqual(format_bill_number(1), 'BILL-000001')
        self.assertEqual(format_bill_number(123456), 'BILL-123456')

    def test_parse_bill_number(self):
        """Test parsing the numeric part of a bill number"""
        self.assertEqual(parse_bill_number('BILL-000017'), 17)
        self.assertIsNone(parse_bill_number('INV-000017'))
        self.assertIsNone(parse_bill_number('BILL-abc'))
        self.assertIsNone(parse_bill_number(''))

    def test_sequence_starts_at_one(self):
        """Test the first allocated number is BILL-000001"""
        self.assertEqual(next_bill_number(), 'BILL-000001')
        self.assertEqual(next_bill_number(), 'BILL-000002')
        self.assertEqual(BillSequence.objects.get().last_value, 2)

    def test_sequence_seeded_from_existing_bills(self):
        """Test the counter continues after bills that predate it"""
        TestDataFactory.create_bill(bill_number='BILL-000007')
        TestDataFactory.create_bill(bill_number='BILL-000003')
        self.assertEqual(next_bill_number(), 'BILL-000008')


class BillAPITests(TestCase):
    """Test bill endpoints"""

    def setUp(self):
        self.client = APIClient()
        self.rice = TestDataFactory.create_product(name='Sona Masoori Rice', units=20, price=Decimal('50.00'),
                                                   category='Rice, Dal & Grains')
        self.oil = TestDataFactory.create_product(name='Mustard Oil', units=5, price=Decimal('30.00'),
                                                  category='Edible Oils & Ghee')

    def create_bill(self, customer_name='Ravi Kumar', items=None, **extra):
        if items is None:
            items = [(self.rice, 2, '50.00'), (self.oil, 1, '30.00')]
        payload = TestDataFactory.bill_payload(customer_name, items, **extra)
        return self.client.post('/api/bills', payload, format='json')

    def test_create_bill(self):
        """Test creating a bill computes totals server side"""
        response = self.create_bill(customer_phone='9876543210')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.json()
        self.assertEqual(data['billNumber'], 'BILL-000001')
        self.assertEqual(data['customerName'], 'Ravi Kumar')
        self.assertEqual(data['customerPhone'], '9876543210')
        self.assertEqual(data['totalAmount'], 130.0)
        self.assertEqual(data['paymentStatus'], 'pending')
        self.assertEqual(data['paymentMethod'], 'cash')
        self.assertEqual([item['totalPrice'] for item in data['items']], [100.0, 30.0])

    def test_create_bill_expands_products(self):
        """Test each item carries the full product on read"""
        response = self.create_bill()
        item = response.json()['items'][0]
        self.assertEqual(item['productId']['id'], self.rice.id)
        self.assertEqual(item['productId']['name'], 'Sona Masoori Rice')
        self.assertEqual(item['productName'], 'Sona Masoori Rice')

    def test_create_bill_decrements_stock(self):
        """Test checkout takes the quantities off product units"""
        self.create_bill()
        self.rice.refresh_from_db()
        self.oil.refresh_from_db()
        self.assertEqual(self.rice.units, 18)
        self.assertEqual(self.oil.units, 4)

    def test_create_bill_same_product_twice(self):
        """Test repeated lines for one product each decrement stock"""
        self.create_bill(items=[(self.rice, 2, '50.00'), (self.rice, 3, '50.00')])
        self.rice.refresh_from_db()
        self.assertEqual(self.rice.units, 15)

    def test_create_bill_allows_negative_stock(self):
        """Test checkout does not block when stock runs out"""
        response = self.create_bill(items=[(self.oil, 8, '30.00')])
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.oil.refresh_from_db()
        self.assertEqual(self.oil.units, -3)

    def test_bill_numbers_increment(self):
        """Test consecutive bills get consecutive numbers"""
        first = self.create_bill().json()
        second = self.create_bill(customer_name='Asha').json()
        self.assertEqual(first['billNumber'], 'BILL-000001')
        self.assertEqual(second['billNumber'], 'BILL-000002')

    def test_bill_number_not_reused_after_delete(self):
        """Test deleting a bill does not free its number"""
        first = self.create_bill().json()
        self.create_bill().json()
        self.client.delete(f"/api/bills/{first['id']}")
        third = self.create_bill().json()
        self.assertEqual(third['billNumber'], 'BILL-000003')

    def test_create_bill_client_totals_ignored(self):
        """Test client-sent totals and bill numbers are ignored"""
        payload = TestDataFactory.bill_payload('Ravi Kumar', [(self.rice, 2, '50.00')])
        payload['totalAmount'] = 1
        payload['billNumber'] = 'BILL-999999'
        payload['items'][0]['totalPrice'] = 5
        response = self.client.post('/api/bills', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.json()['totalAmount'], 100.0)
        self.assertEqual(response.json()['billNumber'], 'BILL-000001')

    def test_create_bill_null_phone(self):
        """Test a null phone is stored as empty"""
        payload = TestDataFactory.bill_payload('Walk-in', [(self.rice, 1, '50.00')])
        payload['customerPhone'] = None
        response = self.client.post('/api/bills', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.json()['customerPhone'], '')

    def test_create_bill_with_payment_fields(self):
        """Test payment status and method are stored"""
        response = self.create_bill(paymentStatus='paid', paymentMethod='upi')
        self.assertEqual(response.json()['paymentStatus'], 'paid')
        self.assertEqual(response.json()['paymentMethod'], 'upi')

    def test_create_bill_without_items(self):
        """Test a bill needs at least one item"""
        response = self.create_bill(items=[])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('items', response.json()['errors'])
        self.assertEqual(Bill.objects.count(), 0)

    def test_create_bill_missing_customer(self):
        """Test customer name is required"""
        response = self.create_bill(customer_name='')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(response.json()['message'].startswith('customerName'))

    def test_create_bill_invalid_quantity(self):
        """Test zero quantity is rejected"""
        response = self.create_bill(items=[(self.rice, 0, '50.00')])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(response.json()['message'].startswith('items[0].quantity'))

    def test_create_bill_negative_price(self):
        """Test negative unit price is rejected"""
        response = self.create_bill(items=[(self.rice, 1, '-5.00')])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_failed_bill_changes_nothing(self):
        """Test an invalid item leaves stock and numbering untouched"""
        payload = TestDataFactory.bill_payload('Ravi Kumar', [(self.rice, 2, '50.00')])
        payload['items'].append({'productId': 9999, 'quantity': 1, 'unitPrice': '10.00'})
        response = self.client.post('/api/bills', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(response.json()['message'].startswith('items[1].productId'))

        self.rice.refresh_from_db()
        self.assertEqual(self.rice.units, 20)
        self.assertEqual(Bill.objects.count(), 0)
        self.assertEqual(self.create_bill().json()['billNumber'], 'BILL-000001')

    def test_failed_stock_update_rolls_back(self):
        """Test an error during checkout rolls back the bill and the counter"""
        with mock.patch('backend.billing.serializers.decrement_stock_for_bill', side_effect=RuntimeError('disk full')):
            response = self.create_bill()
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.json(), {'message': 'disk full'})
        self.assertEqual(Bill.objects.count(), 0)
        self.assertEqual(BillItem.objects.count(), 0)
        self.assertEqual(self.create_bill().json()['billNumber'], 'BILL-000001')

    def test_list_bills_newest_first(self):
        """Test bill list is ordered newest first"""
        self.create_bill(customer_name='First')
        self.create_bill(customer_name='Second')
        response = self.client.get('/api/bills')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([bill['customerName'] for bill in response.json()], ['Second', 'First'])

    def test_search_bills(self):
        """Test search matches bill number or customer name"""
        self.create_bill(customer_name='Ravi Kumar')
        self.create_bill(customer_name='Asha Devi')
        response = self.client.get('/api/bills', {'search': 'asha'})
        self.assertEqual([bill['customerName'] for bill in response.json()], ['Asha Devi'])
        response = self.client.get('/api/bills', {'search': 'BILL-000001'})
        self.assertEqual([bill['customerName'] for bill in response.json()], ['Ravi Kumar'])

    def test_filter_bills_by_payment_status(self):
        """Test paymentStatus filter"""
        self.create_bill(customer_name='Paid', paymentStatus='paid')
        self.create_bill(customer_name='Pending')
        response = self.client.get('/api/bills', {'paymentStatus': 'paid'})
        self.assertEqual([bill['customerName'] for bill in response.json()], ['Paid'])

    def test_get_bill(self):
        """Test retrieving a single bill"""
        bill_id = self.create_bill().json()['id']
        response = self.client.get(f'/api/bills/{bill_id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.json()['items']), 2)

    def test_get_bill_not_found(self):
        """Test unknown bill id returns 404 with a message"""
        response = self.client.get('/api/bills/9999')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json(), {'message': 'Bill not found'})

    def test_get_bill_after_product_deleted(self):
        """Test items of a deleted product come back with a null product"""
        bill_id = self.create_bill().json()['id']
        self.rice.delete()
        response = self.client.get(f'/api/bills/{bill_id}')
        items = response.json()['items']
        self.assertIsNone(items[0]['productId'])
        self.assertEqual(items[0]['productName'], 'Sona Masoori Rice')
        self.assertEqual(items[1]['productId']['id'], self.oil.id)
        self.assertEqual(response.json()['totalAmount'], 130.0)

    def test_update_bill_fields(self):
        """Test updating payment status keeps items and total"""
        bill_id = self.create_bill().json()['id']
        response = self.client.put(f'/api/bills/{bill_id}', {'paymentStatus': 'paid'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['paymentStatus'], 'paid')
        self.assertEqual(response.json()['totalAmount'], 130.0)
        self.assertEqual(len(response.json()['items']), 2)

    def test_update_bill_items_recomputes_total(self):
        """Test replacing items recomputes the total without touching stock"""
        data = self.create_bill().json()
        response = self.client.put(f"/api/bills/{data['id']}", {
            'items': [{'productId': self.oil.id, 'quantity': 3, 'unitPrice': '30.00'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['totalAmount'], 90.0)
        self.assertEqual(response.json()['billNumber'], data['billNumber'])
        self.assertEqual(BillItem.objects.filter(bill_id=data['id']).count(), 1)

        self.rice.refresh_from_db()
        self.oil.refresh_from_db()
        self.assertEqual(self.rice.units, 18)
        self.assertEqual(self.oil.units, 4)

    def test_update_bill_items_require_all_fields(self):
        """Test replacement items without a product or price are rejected"""
        data = self.create_bill().json()
        response = self.client.put(f"/api/bills/{data['id']}", {
            'items': [{'quantity': 2, 'unitPrice': '5.00'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(response.json()['message'].startswith('items[0].productId'))

        response = self.client.patch(f"/api/bills/{data['id']}", {
            'items': [{'productId': self.rice.id, 'quantity': 2}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(response.json()['message'].startswith('items[0].unitPrice'))

        bill = Bill.objects.get(pk=data['id'])
        self.assertEqual(bill.items.count(), 2)
        self.assertEqual(bill.total_amount, Decimal('130.00'))

    def test_update_bill_empty_items(self):
        """Test an update cannot clear all items"""
        data = self.create_bill().json()
        response = self.client.put(f"/api/bills/{data['id']}", {'items': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(BillItem.objects.filter(bill_id=data['id']).count(), 2)

    def test_create_bill_quantity_too_large(self):
        """Test quantities above the cap are rejected"""
        response = self.create_bill(items=[(self.rice, 10 ** 9, '99999999.99')])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(response.json()['message'].startswith('items[0].quantity'))
        self.rice.refresh_from_db()
        self.assertEqual(self.rice.units, 20)

    def test_create_bill_line_total_too_large(self):
        """Test a line total that does not fit the amount field is rejected"""
        response = self.create_bill(items=[(self.rice, 99999, '99999999.99')])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(response.json()['message'].startswith('items: Item 1 total'))
        self.assertEqual(Bill.objects.count(), 0)

    def test_create_bill_total_too_large(self):
        """Test a bill total that does not fit the amount field is rejected"""
        response = self.create_bill(items=[(self.rice, 99999, '60000.00'), (self.oil, 99999, '60000.00')])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(response.json()['message'].startswith('items: Bill total'))
        self.assertEqual(Bill.objects.count(), 0)

    def test_update_bill_total_too_large(self):
        """Test oversized replacement items are rejected on update"""
        data = self.create_bill().json()
        response = self.client.put(f"/api/bills/{data['id']}", {
            'items': [{'productId': self.oil.id, 'quantity': 99999, 'unitPrice': '99999999.99'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Bill.objects.get(pk=data['id']).total_amount, Decimal('130.00'))

    def test_update_bill_invalid(self):
        """Test invalid update is rejected"""
        bill_id = self.create_bill().json()['id']
        response = self.client.patch(f'/api/bills/{bill_id}', {'paymentMethod': 'cheque'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_bill_not_found(self):
        """Test updating an unknown bill returns 404"""
        response = self.client.put('/api/bills/9999', {'paymentStatus': 'paid'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_bill_keeps_stock(self):
        """Test deleting a bill does not restore stock"""
        bill_id = self.create_bill().json()['id']
        response = self.client.delete(f'/api/bills/{bill_id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), {'message': 'Bill deleted successfully'})
        self.assertEqual(Bill.objects.count(), 0)
        self.assertEqual(BillItem.objects.count(), 0)
        self.rice.refresh_from_db()
        self.assertEqual(self.rice.units, 18)

    def test_delete_bill_not_found(self):
        """Test deleting an unknown bill returns 404"""
        response = self.client.delete('/api/bills/9999')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(Product.objects.count(), 2)


class CheckBillConsistencyCommandTests(TestCase):
    """Test check_bill_consistency management command"""

    def setUp(self):
        self.product = TestDataFactory.create_product(name='Biscuits', units=5)
        self.bill = TestDataFactory.create_bill(items=[(self.product, 2, Decimal('10.00'))])

    def run_command(self, *args):
        out = StringIO()
        call_command('check_bill_consistency', *args, stdout=out)
        return out.getvalue()

    def test_consistent_bills(self):
        """Test a clean database reports no problems"""
        output = self.run_command()
        self.assertIn('Mismatched bills: 0', output)
        self.assertIn('All bill totals match their items', output)

    def test_reports_and_fixes_mismatch(self):
        """Test a wrong total is reported and fixed with --fix"""
        Bill.objects.filter(pk=self.bill.pk).update(total_amount=Decimal('99.00'))
        output = self.run_command()
        self.assertIn('Mismatched bills: 1', output)
        self.bill.refresh_from_db()
        self.assertEqual(self.bill.total_amount, Decimal('99.00'))

        self.run_command('--fix')
        self.bill.refresh_from_db()
        self.assertEqual(self.bill.total_amount, Decimal('20.00'))

    def test_reports_deleted_products_and_negative_stock(self):
        """Test dangling items and negative units are counted"""
        other = TestDataFactory.create_product(name='Overdrawn', units=-2)
        self.product.delete()
        output = self.run_command('--bill-id', str(self.bill.pk))
        self.assertIn('Items with deleted products: 1', output)
        self.assertIn('Products with negative stock: 1', output)
        self.assertIn(other.name, output)

"""
Test suite for the store client
Tests: Retrying loads, error handling, customer grouping, drafting, and end-to-end calls against the API
"""
from decimal import Decimal
from unittest import mock
from django.test import SimpleTestCase, TestCase
import requests
from rest_framework.test import RequestsClient
from backend.core.test_utils import TestDataFactory
from storeclient import StoreClient, APIError
from storeclient.billing import search_bills, build_line_item, draft_total, build_bill_payload, bill_to_draft
from storeclient.catalog import search_products, low_stock_products
from storeclient.customers import group_customers, filter_customers, customer_directory
from storeclient.dashboard import recent_bills, derive_stats


def fake_response(status_code=200, body=None):
    response = mock.Mock()
    response.ok = status_code < 400
    response.status_code = status_code
    response.json.return_value = body
    response.text = ''
    response.reason = 'Error'
    return response


def make_bill(number, name, phone='', amount=0, status='pending'):
    return {
        'billNumber': number,
        'customerName': name,
        'customerPhone': phone,
        'totalAmount': amount,
        'paymentStatus': status,
    }


class StoreClientRetryTests(SimpleTestCase):
    """Test retry and error behaviour with a mocked session"""

    def setUp(self):
        self.session = mock.Mock()
        self.client = StoreClient('http://store.local/api/', session=self.session, max_retries=3, retry_delay=0)

    def test_base_url_from_environment(self):
        """Test STORE_API_URL is used when no base URL is given"""
        with mock.patch.dict('os.environ', {'STORE_API_URL': 'http://shop:9000/api'}):
            client = StoreClient(session=self.session)
        self.assertEqual(client.base_url, 'http://shop:9000/api')

    def test_list_products_retries_then_succeeds(self):
        """Test a transient failure is retried"""
        self.session.request.side_effect = [
            requests.ConnectionError('down'),
            fake_response(500, {'message': 'db busy'}),
            fake_response(200, [{'id': 1}]),
        ]
        self.assertEqual(self.client.list_products(), [{'id': 1}])
        self.assertEqual(self.session.request.call_count, 3)
        self.session.request.assert_called_with(
            'GET', 'http://store.local/api/products', timeout=10, params=None
        )

    def test_list_bills_gives_up_after_max_retries(self):
        """Test the last error is raised once retries run out"""
        self.session.request.return_value = fake_response(500, {'message': 'db down'})
        with self.assertRaises(APIError) as ctx:
            self.client.list_bills()
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(ctx.exception.message, 'db down')
        self.assertEqual(self.session.request.call_count, 4)

    def test_retry_waits_between_attempts(self):
        """Test the fixed delay between attempts"""
        client = StoreClient('http://store.local/api', session=self.session, max_retries=2, retry_delay=1.5)
        self.session.request.side_effect = [requests.Timeout('slow'), fake_response(200, {})]
        with mock.patch('storeclient.api.time.sleep') as sleep:
            client.dashboard_stats()
        sleep.assert_called_once_with(1.5)

    def test_mutation_not_retried(self):
        """Test create calls are sent once and re-raised"""
        self.session.request.return_value = fake_response(400, {'message': 'name: This field is required.'})
        with self.assertLogs('storeclient', level='ERROR'):
            with self.assertRaises(APIError) as ctx:
                self.client.create_product({'units': 1})
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(self.session.request.call_count, 1)

    def test_error_without_json_body(self):
        """Test non JSON error bodies fall back to the response text"""
        response = fake_response(502)
        response.json.side_effect = ValueError('no json')
        response.text = 'Bad Gateway'
        self.session.request.return_value = response
        with self.assertRaises(APIError) as ctx:
            self.client.get_product(3)
        self.assertEqual(ctx.exception.message, 'Bad Gateway')
        self.assertEqual(str(ctx.exception), 'Status 502: Bad Gateway')

    def test_load_records_notifications(self):
        """Test load keeps going when one fetch keeps failing"""
        def request(method, url, **kwargs):
            if url.endswith('/bills'):
                return fake_response(500, {'message': 'boom'})
            if url.endswith('/products'):
                return fake_response(200, [{'id': 1}])
            return fake_response(200, {'totalProducts': 1})

        self.session.request.side_effect = request
        snapshot = self.client.load()
        self.assertEqual(snapshot.products, [{'id': 1}])
        self.assertEqual(snapshot.bills, [])
        self.assertEqual(snapshot.stats, {'totalProducts': 1})
        self.assertFalse(snapshot.ok)
        self.assertEqual(snapshot.notifications, ['Error fetching bills: Status 500: boom'])


class CustomerGroupingTests(SimpleTestCase):
    """Test customer directory derived from bills"""

    def setUp(self):
        self.bills = [
            make_bill('BILL-000004', 'Ravi', '98765', 100, 'paid'),
            make_bill('BILL-000003', 'Asha', '', 40, 'pending'),
            make_bill('BILL-000002', 'Ravi', '98765', 25.5, 'partial'),
            make_bill('BILL-000001', 'Ravi', '11111', 10, 'paid'),
        ]
        self.bills[1]['customerPhone'] = None

    def test_group_by_name_and_phone(self):
        """Test bills group on name and phone in first-seen order"""
        customers = group_customers(self.bills)
        self.assertEqual([(c['name'], c['phone']) for c in customers],
                         [('Ravi', '98765'), ('Asha', ''), ('Ravi', '11111')])
        ravi = customers[0]
        self.assertEqual([b['billNumber'] for b in ravi['bills']], ['BILL-000004', 'BILL-000002'])
        self.assertEqual(ravi['paidTotal'], 100)
        self.assertEqual(ravi['pendingTotal'], 25.5)

    def test_grouping_is_idempotent(self):
        """Test grouping the same bills twice gives the same result"""
        self.assertEqual(group_customers(self.bills), group_customers(self.bills))
        self.assertNotIn('paidTotal', self.bills[0])

    def test_search_by_name_or_phone(self):
        """Test name search ignores case and phone search is a substring"""
        customers = group_customers(self.bills)
        self.assertEqual([c['name'] for c in filter_customers(customers, search='ASHA')], ['Asha'])
        self.assertEqual([c['phone'] for c in filter_customers(customers, search='111')], ['11111'])

    def test_status_filter(self):
        """Test status keeps customers with at least one matching bill"""
        customers = group_customers(self.bills)
        self.assertEqual(len(filter_customers(customers, status='all')), 3)
        self.assertEqual([c['phone'] for c in filter_customers(customers, status='partial')], ['98765'])
        self.assertEqual(len(filter_customers(customers, status='paid')), 2)

    def test_directory_summary(self):
        """Test paid and pending totals over the filtered customers"""
        directory = customer_directory(self.bills, search='ravi')
        self.assertEqual(directory['customers'], 2)
        self.assertEqual(directory['paidTotal'], 110)
        self.assertEqual(directory['pendingTotal'], 25.5)

    def test_empty_bills(self):
        """Test no bills means no customers"""
        self.assertEqual(customer_directory([])['customers'], 0)


class ListHelperTests(SimpleTestCase):
    """Test search, drafting and dashboard helpers"""

    def setUp(self):
        self.products = [
            {'id': 1, 'name': 'Garam Masala', 'category': 'Spices & Masalas', 'units': 4, 'price': 55.0},
            {'id': 2, 'name': 'Cola', 'category': 'Beverages', 'units': 30, 'price': 40.0},
        ]

    def test_search_products(self):
        """Test product search on name or category"""
        self.assertEqual([p['id'] for p in search_products(self.products, 'spices')], [1])
        self.assertEqual([p['id'] for p in search_products(self.products, 'COLA')], [2])
        self.assertEqual(len(search_products(self.products, '')), 2)

    def test_low_stock_products(self):
        """Test low stock is fewer than ten units"""
        self.assertEqual([p['id'] for p in low_stock_products(self.products)], [1])

    def test_search_bills(self):
        """Test bill search on number or customer"""
        bills = [make_bill('BILL-000001', 'Ravi'), make_bill('BILL-000002', 'Asha')]
        self.assertEqual([b['customerName'] for b in search_bills(bills, 'asha')], ['Asha'])
        self.assertEqual([b['customerName'] for b in search_bills(bills, 'bill-000001')], ['Ravi'])

    def test_build_line_item(self):
        """Test a line uses the product price"""
        item = build_line_item(self.products[0], 3)
        self.assertEqual(item['productId'], 1)
        self.assertEqual(item['unitPrice'], 55.0)
        self.assertEqual(item['totalPrice'], 165.0)
        self.assertEqual(draft_total([item, build_line_item(self.products[1])]), 205.0)

    def test_build_line_item_invalid_quantity(self):
        """Test quantity must be positive"""
        with self.assertRaises(ValueError):
            build_line_item(self.products[0], 0)

    def test_build_bill_payload_from_saved_bill(self):
        """Test items read back from the API are sent as product ids"""
        saved = {
            'customerName': ' Ravi ', 'customerPhone': None, 'paymentStatus': 'paid', 'paymentMethod': 'upi',
            'items': [{'productId': {'id': 7, 'name': 'Cola'}, 'productName': 'Cola', 'quantity': 2,
                       'unitPrice': 40.0, 'totalPrice': 80.0}],
        }
        draft = bill_to_draft(saved)
        payload = build_bill_payload(draft['customerName'], draft['items'], draft['customerPhone'],
                                     draft['paymentStatus'], draft['paymentMethod'])
        self.assertEqual(payload['customerName'], 'Ravi')
        self.assertEqual(payload['customerPhone'], '')
        self.assertEqual(payload['items'], [
            {'productId': 7, 'productName': 'Cola', 'quantity': 2, 'unitPrice': 40.0}
        ])

    def test_build_bill_payload_rejects_bad_drafts(self):
        """Test blank customer, no items and deleted products"""
        item = build_line_item(self.products[0])
        with self.assertRaises(ValueError):
            build_bill_payload('  ', [item])
        with self.assertRaises(ValueError):
            build_bill_payload('Ravi', [])
        with self.assertRaises(ValueError):
            build_bill_payload('Ravi', [dict(item, productId=None)])

    def test_dashboard(self):
        """Test recent bills and locally derived stats"""
        bills = [make_bill(f'BILL-{n:06d}', 'Ravi', amount=10) for n in range(7, 0, -1)]
        self.assertEqual([b['billNumber'] for b in recent_bills(bills)],
                         ['BILL-000007', 'BILL-000006', 'BILL-000005', 'BILL-000004', 'BILL-000003'])
        self.assertEqual(derive_stats(self.products, bills), {
            'totalProducts': 2,
            'totalBills': 7,
            'totalRevenue': 70,
            'lowStockProducts': 1,
        })


class StoreClientEndToEndTests(TestCase):
    """Test the client against the real API in-process"""

    def setUp(self):
        self.client = StoreClient('http://testserver/api', session=RequestsClient(), retry_delay=0)

    def test_product_and_bill_flow(self):
        """Test creating products and a bill, then reloading everything"""
        rice = self.client.create_product({
            'name': 'Basmati Rice', 'units': 11, 'weight': 5, 'weightUnit': 'kg',
            'price': 450, 'category': 'Rice, Dal & Grains',
        })
        oil = self.client.create_product({
            'name': 'Groundnut Oil', 'units': 30, 'weight': 1, 'price': 180, 'category': 'Edible Oils & Ghee',
        })
        items = [build_line_item(rice, 2), build_line_item(oil, 1)]
        bill = self.client.create_bill(build_bill_payload('Meena', items, '90000 11111'))
        self.assertEqual(bill['billNumber'], 'BILL-000001')
        self.assertEqual(bill['totalAmount'], 1080.0)
        self.assertEqual(bill['totalAmount'], draft_total(items))

        snapshot = self.client.load()
        self.assertTrue(snapshot.ok)
        self.assertEqual(len(snapshot.products), 2)
        self.assertEqual(snapshot.stats, derive_stats(snapshot.products, snapshot.bills))
        self.assertEqual(snapshot.stats['lowStockProducts'], 1)

        directory = customer_directory(snapshot.bills)
        self.assertEqual(directory['results'][0]['name'], 'Meena')
        self.assertEqual(directory['pendingTotal'], 1080.0)

    def test_update_bill_from_draft(self):
        """Test editing a fetched bill round-trips through the payload builder"""
        product = TestDataFactory.create_product(price=Decimal('20.00'))
        payload = TestDataFactory.bill_payload('Kiran', [(product, 1, '20.00')])
        created = self.client.create_bill(payload)

        draft = bill_to_draft(self.client.get_bill(created['id']))
        updated = self.client.update_bill(created['id'], build_bill_payload(
            draft['customerName'], draft['items'], draft['customerPhone'], 'paid', draft['paymentMethod']
        ))
        self.assertEqual(updated['paymentStatus'], 'paid')
        self.assertEqual(updated['totalAmount'], 20.0)

    def test_not_found_raises(self):
        """Test 404 surfaces as APIError with the server message"""
        with self.assertRaises(APIError) as ctx:
            self.client.get_bill(999)
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertEqual(ctx.exception.message, 'Bill not found')

    def test_delete_product(self):
        """Test deleting through the client"""
        product = TestDataFactory.create_product()
        self.assertEqual(self.client.delete_product(product.id), {'message': 'Product deleted successfully'})
        self.assertEqual(self.client.list_products(), [])

"""
Test suite for Reports module
Tests: Dashboard stats counts, revenue and low stock
"""
from decimal import Decimal
from django.test import TestCase, override_settings
from rest_framework import status
from rest_framework.test import APIClient
from backend.core.test_utils import TestDataFactory
from backend.reports.views import get_dashboard_stats


class DashboardStatsTests(TestCase):
    """Test dashboard stats endpoint"""

    def setUp(self):
        self.client = APIClient()

    def test_empty_store(self):
        """Test stats for an empty store are all zero"""
        response = self.client.get('/api/dashboard/stats')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), {
            'totalProducts': 0,
            'totalBills': 0,
            'totalRevenue': 0,
            'lowStockProducts': 0,
        })

    def test_stats(self):
        """Test counts, revenue and low stock"""
        low = TestDataFactory.create_product(units=4)
        TestDataFactory.create_product(units=10)
        TestDataFactory.create_product(units=50)
        TestDataFactory.create_bill(items=[(low, 2, Decimal('50.00')), (low, 1, Decimal('30.00'))])
        TestDataFactory.create_bill(items=[(low, 1, Decimal('19.50'))])

        response = self.client.get('/api/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()
        self.assertEqual(data['totalProducts'], 3)
        self.assertEqual(data['totalBills'], 2)
        self.assertEqual(data['totalRevenue'], 149.5)
        self.assertEqual(data['lowStockProducts'], 1)

    def test_revenue_counts_all_payment_statuses(self):
        """Test pending bills count towards revenue"""
        product = TestDataFactory.create_product()
        TestDataFactory.create_bill(items=[(product, 1, Decimal('10.00'))], payment_status='paid')
        TestDataFactory.create_bill(items=[(product, 1, Decimal('5.00'))], payment_status='pending')
        self.assertEqual(get_dashboard_stats()['totalRevenue'], 15.0)

    def test_stats_follow_checkout(self):
        """Test a bill created through the API shows up in the stats"""
        product = TestDataFactory.create_product(units=11)
        self.client.post('/api/bills', TestDataFactory.bill_payload('Ravi', [(product, 2, '25.00')]), format='json')
        data = self.client.get('/api/dashboard/stats').json()
        self.assertEqual(data['totalBills'], 1)
        self.assertEqual(data['totalRevenue'], 50.0)
        self.assertEqual(data['lowStockProducts'], 1)

    @override_settings(LOW_STOCK_THRESHOLD=60)
    def test_low_stock_threshold_setting(self):
        """Test low stock uses LOW_STOCK_THRESHOLD"""
        TestDataFactory.create_product(units=50)
        self.assertEqual(get_dashboard_stats()['lowStockProducts'], 1)

    def test_low_stock_threshold_argument(self):
        """Test an explicit threshold overrides the setting"""
        TestDataFactory.create_product(units=50)
        self.assertEqual(get_dashboard_stats(low_stock_threshold=51)['lowStockProducts'], 1)
        self.assertEqual(get_dashboard_stats(low_stock_threshold=50)['lowStockProducts'], 0)

    def test_post_not_allowed(self):
        """Test stats are read only"""
        response = self.client.post('/api/dashboard/stats', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertIn('message', response.json())

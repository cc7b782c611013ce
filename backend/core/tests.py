"""
Test suite for Core module
Tests: API error envelope and request logging
"""
from django.db import IntegrityError
from django.test import TestCase, SimpleTestCase
from rest_framework import status
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.test import APIClient
from backend.core.exceptions import api_exception_handler, _first_error


class FirstErrorTests(SimpleTestCase):
    """Test flattening of validation errors"""

    def test_field_error(self):
        """Test a plain field error"""
        self.assertEqual(_first_error({'name': ['This field is required.']}), 'name: This field is required.')

    def test_nested_list_error(self):
        """Test errors inside a list of items carry the index"""
        detail = {'items': [{}, {'quantity': ['Ensure this value is greater than or equal to 1.']}]}
        self.assertEqual(
            _first_error(detail),
            'items[1].quantity: Ensure this value is greater than or equal to 1.'
        )

    def test_index_keyed_item_error(self):
        """Test errors keyed by item index carry the index"""
        detail = {'items': {'2': {'unitPrice': ['A valid number is required.']}}}
        self.assertEqual(_first_error(detail), 'items[2].unitPrice: A valid number is required.')
        detail = {'items': {0: {'quantity': ['Ensure this value is greater than or equal to 1.']}}}
        self.assertEqual(
            _first_error(detail),
            'items[0].quantity: Ensure this value is greater than or equal to 1.'
        )

    def test_non_field_error(self):
        """Test non field errors have no prefix"""
        self.assertEqual(_first_error({'non_field_errors': ['Bad data']}), 'Bad data')

    def test_no_error(self):
        """Test empty detail yields nothing"""
        self.assertIsNone(_first_error({}))


class ExceptionHandlerTests(SimpleTestCase):
    """Test the API exception handler"""

    def test_validation_error(self):
        """Test validation errors become 400 with message and errors"""
        response = api_exception_handler(ValidationError({'units': ['A valid integer is required.']}), {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'units: A valid integer is required.')
        self.assertIn('units', response.data['errors'])

    def test_api_exception(self):
        """Test other API exceptions keep their status with a message"""
        response = api_exception_handler(NotFound('Nothing here'), {})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'message': 'Nothing here'})

    def test_integrity_error(self):
        """Test database integrity errors become 400"""
        response = api_exception_handler(IntegrityError('UNIQUE constraint failed: bills.bill_number'), {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('bill_number', response.data['message'])

    def test_unexpected_error(self):
        """Test unknown exceptions become 500 with the raw message"""
        with self.assertLogs('backend.api', level='ERROR'):
            response = api_exception_handler(RuntimeError('boom'), {})
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {'message': 'boom'})


class RequestLoggingTests(TestCase):
    """Test request logging middleware"""

    def test_request_is_logged(self):
        """Test each request logs method, path and status"""
        client = APIClient()
        with self.assertLogs('backend.requests', level='INFO') as logs:
            client.get('/api/products')
        self.assertTrue(any('GET /api/products 200' in line for line in logs.output))

    def test_list_filters_are_logged(self):
        """Test the query string filters appear in the log line"""
        client = APIClient()
        with self.assertLogs('backend.requests', level='INFO') as logs:
            client.get('/api/products', {'lowStock': 'true'})
        self.assertTrue(any(line.endswith('filters=lowStock=true') for line in logs.output))

    def test_client_error_logged_as_warning(self):
        """Test 4xx responses log at WARNING"""
        client = APIClient()
        with self.assertLogs('backend.requests', level='WARNING') as logs:
            client.get('/api/bills/9999')
        self.assertEqual(len(logs.records), 1)
        self.assertIn('GET /api/bills/9999 404', logs.output[0])

    def test_malformed_json(self):
        """Test a malformed body gets a 400 with a message"""
        client = APIClient()
        response = client.post('/api/products', data='{bad json', content_type='application/json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('message', response.json())

"""
Test utilities and factories for creating test data
"""
from decimal import Decimal
from backend.catalog.models import Product
from backend.billing.models import Bill, BillItem
from backend.billing.utils import format_bill_number
import random
import string


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_product(name=None, units=50, price=None, category='Snacks & Biscuits',
                       weight=None, weight_unit='kg', description=''):
        """Create a test product"""
        if not name:
            name = f'Product_{TestDataFactory.random_string(6)}'
        return Product.objects.create(
            name=name,
            units=units,
            weight=weight if weight is not None else Decimal('1.000'),
            weight_unit=weight_unit,
            price=price if price is not None else Decimal('10.00'),
            category=category,
            description=description,
        )

    @staticmethod
    def create_bill(customer_name=None, customer_phone='', items=None, payment_status='pending',
                    payment_method='cash', bill_number=None):
        """
        Create a bill directly in the database.

        `items` is a list of (product, quantity, unit_price) tuples. Stock is
        not touched and the bill sequence is bypassed, so use the API when a
        test needs checkout behaviour.
        """
        if not customer_name:
            customer_name = f'Customer_{TestDataFactory.random_string(6)}'
        if not bill_number:
            bill_number = format_bill_number(Bill.objects.count() + 1)
        bill = Bill.objects.create(
            bill_number=bill_number,
            customer_name=customer_name,
            customer_phone=customer_phone,
            payment_status=payment_status,
            payment_method=payment_method,
        )
        total = Decimal('0.00')
        for position, (product, quantity, unit_price) in enumerate(items or []):
            unit_price = Decimal(str(unit_price))
            item = BillItem.objects.create(
                bill=bill,
                product=product,
                product_name=product.name if product else '',
                quantity=quantity,
                unit_price=unit_price,
                total_price=quantity * unit_price,
                position=position,
            )
            total += item.total_price
        bill.total_amount = total
        bill.save(update_fields=['total_amount', 'updated_at'])
        return bill

    @staticmethod
    def bill_payload(customer_name, items, customer_phone='', **extra):
        """Request body for POST /api/bills. `items` is a list of (product, quantity, unit_price)."""
        payload = {
            'customerName': customer_name,
            'customerPhone': customer_phone,
            'items': [
                {'productId': product.pk, 'quantity': quantity, 'unitPrice': str(unit_price)}
                for product, quantity, unit_price in items
            ],
        }
        payload.update(extra)
        return payload

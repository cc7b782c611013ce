from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
from backend.catalog.models import Product


class Bill(models.Model):
    """Bills"""
    PAYMENT_STATUS_CHOICES = [
        ('paid', 'Paid'),
        ('pending', 'Pending'),
        ('partial', 'Partially Paid'),
    ]

    PAYMENT_METHOD_CHOICES = [
        ('cash', 'Cash'),
        ('card', 'Card'),
        ('upi', 'UPI'),
        ('credit', 'Credit'),
    ]

    bill_number = models.CharField(max_length=20, unique=True)
    customer_name = models.CharField(max_length=200, db_index=True)
    customer_phone = models.CharField(max_length=20, blank=True)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'),
                                       validators=[MinValueValidator(Decimal('0'))])
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default='pending', db_index=True)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default='cash')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.bill_number

    def get_items_total(self):
        """Sum of line totals for the items currently stored on this bill"""
        return sum((item.total_price for item in self.items.all()), Decimal('0.00'))

    class Meta:
        db_table = 'bills'
        ordering = ['-created_at', '-id']


class BillItem(models.Model):
    """Bill line items"""
    bill = models.ForeignKey(Bill, on_delete=models.CASCADE, related_name='items')
    # Nullable so that deleting a product keeps the bill history
    product = models.ForeignKey(Product, on_delete=models.SET_NULL, null=True, blank=True, related_name='bill_items')
    product_name = models.CharField(max_length=200, blank=True)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0'))])
    total_price = models.DecimalField(max_digits=12, decimal_places=2)
    position = models.PositiveIntegerField(default=0)

    def __str__(self):
        return f"{self.product_name} x {self.quantity}"

    def get_line_total(self):
        return self.quantity * self.unit_price

    class Meta:
        db_table = 'bill_items'
        ordering = ['position', 'id']
        indexes = [
            models.Index(fields=['bill', 'product'], name='idx_billitem_bill_product'),
        ]


class BillSequence(models.Model):
    """Durable counter for bill numbers"""
    name = models.CharField(max_length=50, unique=True)
    last_value = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name}: {self.last_value}"

    class Meta:
        db_table = 'bill_sequences'

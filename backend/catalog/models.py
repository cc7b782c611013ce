from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal


CATEGORY_CHOICES = [
    ('Spices & Masalas', 'Spices & Masalas'),
    ('Rice, Dal & Grains', 'Rice, Dal & Grains'),
    ('Bakery & Dairy', 'Bakery & Dairy'),
    ('Snacks & Biscuits', 'Snacks & Biscuits'),
    ('Packaged Foods', 'Packaged Foods'),
    ('Edible Oils & Ghee', 'Edible Oils & Ghee'),
    ('Chocolates', 'Chocolates'),
    ('Beverages', 'Beverages'),
    ('Personal Care', 'Personal Care'),
    ('Household Items', 'Household Items'),
    ('Baby Products', 'Baby Products'),
    ('Miscellaneous Items', 'Miscellaneous Items'),
]


class Product(models.Model):
    """Product master"""
    WEIGHT_UNIT_CHOICES = [
        ('kg', 'Kilogram'),
        ('gram', 'Gram'),
    ]

    name = models.CharField(max_length=200, db_index=True)
    # Not a PositiveIntegerField: bill checkout decrements without an availability check
    units = models.IntegerField(validators=[MinValueValidator(0)])
    weight = models.DecimalField(max_digits=10, decimal_places=3, validators=[MinValueValidator(Decimal('0'))])
    weight_unit = models.CharField(max_length=10, choices=WEIGHT_UNIT_CHOICES, default='kg')
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0'))])
    category = models.CharField(max_length=100, choices=CATEGORY_CHOICES, db_index=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.category})"

    def is_low_stock(self, threshold):
        return self.units < threshold

    class Meta:
        db_table = 'products'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['-created_at'], name='idx_product_created'),
            models.Index(fields=['units'], name='idx_product_units'),
        ]

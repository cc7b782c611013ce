# Generated manually for the Product model

import django.core.validators
from django.db import migrations, models
from decimal import Decimal


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(db_index=True, max_length=200)),
                ('units', models.IntegerField(validators=[django.core.validators.MinValueValidator(0)])),
                ('weight', models.DecimalField(decimal_places=3, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('weight_unit', models.CharField(choices=[('kg', 'Kilogram'), ('gram', 'Gram')], default='kg', max_length=10)),
                ('price', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('category', models.CharField(choices=[('Spices & Masalas', 'Spices & Masalas'), ('Rice, Dal & Grains', 'Rice, Dal & Grains'), ('Bakery & Dairy', 'Bakery & Dairy'), ('Snacks & Biscuits', 'Snacks & Biscuits'), ('Packaged Foods', 'Packaged Foods'), ('Edible Oils & Ghee', 'Edible Oils & Ghee'), ('Chocolates', 'Chocolates'), ('Beverages', 'Beverages'), ('Personal Care', 'Personal Care'), ('Household Items', 'Household Items'), ('Baby Products', 'Baby Products'), ('Miscellaneous Items', 'Miscellaneous Items')], db_index=True, max_length=100)),
                ('description', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'products',
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['-created_at'], name='idx_product_created'), models.Index(fields=['units'], name='idx_product_units')],
            },
        ),
    ]

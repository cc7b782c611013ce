from decimal import Decimal
from django.db import transaction
from rest_framework import serializers
from backend.catalog.models import Product
from backend.catalog.serializers import ProductSerializer
from .models import Bill, BillItem
from .utils import next_bill_number, decrement_stock_for_bill

# Largest value the DecimalField(max_digits=12, decimal_places=2) totals can hold
MAX_TOTAL = Decimal('9999999999.99')
MAX_QUANTITY = 100000


class BillItemSerializer(serializers.ModelSerializer):
    # Written as a product id, read back as the full product (None once the product is deleted)
    productId = serializers.PrimaryKeyRelatedField(source='product', queryset=Product.objects.all())
    productName = serializers.CharField(source='product_name', max_length=200, required=False, allow_blank=True)
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_QUANTITY)
    unitPrice = serializers.DecimalField(source='unit_price', max_digits=10, decimal_places=2, min_value=Decimal('0'))
    totalPrice = serializers.DecimalField(source='total_price', max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = BillItem
        fields = ['id', 'productId', 'productName', 'quantity', 'unitPrice', 'totalPrice']

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data['productId'] = ProductSerializer(instance.product).data if instance.product else None
        return data


class BillSerializer(serializers.ModelSerializer):
    billNumber = serializers.CharField(source='bill_number', read_only=True)
    customerName = serializers.CharField(source='customer_name', max_length=200)
    customerPhone = serializers.CharField(source='customer_phone', max_length=20, required=False,
                                          allow_blank=True, allow_null=True)
    items = BillItemSerializer(many=True)
    totalAmount = serializers.DecimalField(source='total_amount', max_digits=12, decimal_places=2, read_only=True)
    paymentStatus = serializers.ChoiceField(source='payment_status', choices=Bill.PAYMENT_STATUS_CHOICES, required=False)
    paymentMethod = serializers.ChoiceField(source='payment_method', choices=Bill.PAYMENT_METHOD_CHOICES, required=False)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Bill
        fields = [
            'id', 'billNumber', 'customerName', 'customerPhone', 'items', 'totalAmount',
            'paymentStatus', 'paymentMethod', 'createdAt', 'updatedAt'
        ]

    def validate_customerPhone(self, value):
        return value or ''

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError('A bill needs at least one item.')
        if self.partial:
            # Partial bill updates still replace whole items, so every item field stays required
            items = BillItemSerializer(data=self.initial_data.get('items'), many=True)
            if not items.is_valid():
                raise serializers.ValidationError(items.errors)
            return items.validated_data
        return value

    def validate(self, attrs):
        items = attrs.get('items')
        if items:
            bill_total = Decimal('0.00')
            for index, item in enumerate(items):
                line_total = item['quantity'] * item['unit_price']
                if line_total > MAX_TOTAL:
                    raise serializers.ValidationError(
                        {'items': f'Item {index + 1} total {line_total} is more than {MAX_TOTAL}.'}
                    )
                bill_total += line_total
            if bill_total > MAX_TOTAL:
                raise serializers.ValidationError({'items': f'Bill total {bill_total} is more than {MAX_TOTAL}.'})
        return attrs

    @staticmethod
    def _create_items(bill, items_data):
        """Create the line items and return the bill total"""
        items = []
        for position, item_data in enumerate(items_data):
            product = item_data['product']
            quantity = item_data['quantity']
            unit_price = item_data['unit_price']
            items.append(BillItem(
                bill=bill,
                product=product,
                product_name=item_data.get('product_name') or product.name,
                quantity=quantity,
                unit_price=unit_price,
                total_price=quantity * unit_price,
                position=position,
            ))
        BillItem.objects.bulk_create(items)
        return sum((item.total_price for item in items), Decimal('0.00'))

    def create(self, validated_data):
        items_data = validated_data.pop('items')
        with transaction.atomic():
            bill = Bill.objects.create(bill_number=next_bill_number(), **validated_data)
            bill.total_amount = self._create_items(bill, items_data)
            bill.save(update_fields=['total_amount', 'updated_at'])
            decrement_stock_for_bill(bill)
        return bill

    def update(self, instance, validated_data):
        # Editing a bill never touches product stock
        items_data = validated_data.pop('items', None)
        with transaction.atomic():
            for attr, value in validated_data.items():
                setattr(instance, attr, value)
            if items_data is not None:
                instance.items.all().delete()
                instance.total_amount = self._create_items(instance, items_data)
            instance.save()
        return instance

from rest_framework import serializers
from .models import Product


class ProductSerializer(serializers.ModelSerializer):
    weightUnit = serializers.ChoiceField(source='weight_unit', choices=Product.WEIGHT_UNIT_CHOICES, required=False)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Product
        fields = ['id', 'name', 'units', 'weight', 'weightUnit', 'price', 'category', 'description', 'createdAt', 'updatedAt']

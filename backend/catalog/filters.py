import django_filters
from django.conf import settings
from django.db.models import Q
from .models import Product, CATEGORY_CHOICES


class ProductFilter(django_filters.FilterSet):
    """Query filters for the product list"""

    # Matches the product screen search box: name or category
    search = django_filters.CharFilter(method='filter_search', label='Search')
    category = django_filters.ChoiceFilter(field_name='category', choices=CATEGORY_CHOICES)
    lowStock = django_filters.CharFilter(method='filter_low_stock', label='Low Stock')

    class Meta:
        model = Product
        fields = ['search', 'category', 'lowStock']

    def filter_search(self, queryset, name, value):
        value = (value or '').strip()
        if not value:
            return queryset
        return queryset.filter(Q(name__icontains=value) | Q(category__icontains=value))

    def filter_low_stock(self, queryset, name, value):
        if value == 'true':
            return queryset.filter(units__lt=settings.LOW_STOCK_THRESHOLD)
        if value == 'false':
            return queryset.filter(units__gte=settings.LOW_STOCK_THRESHOLD)
        return queryset

import django_filters
from django.db.models import Q
from .models import Bill


class BillFilter(django_filters.FilterSet):
    """Query filters for the bill list"""

    search = django_filters.CharFilter(method='filter_search', label='Search')
    paymentStatus = django_filters.ChoiceFilter(field_name='payment_status', choices=Bill.PAYMENT_STATUS_CHOICES)
    paymentMethod = django_filters.ChoiceFilter(field_name='payment_method', choices=Bill.PAYMENT_METHOD_CHOICES)
    customerPhone = django_filters.CharFilter(field_name='customer_phone', lookup_expr='exact')

    class Meta:
        model = Bill
        fields = ['search', 'paymentStatus', 'paymentMethod', 'customerPhone']

    def filter_search(self, queryset, name, value):
        """Substring match on bill number or customer name"""
        value = (value or '').strip()
        if not value:
            return queryset
        return queryset.filter(Q(bill_number__icontains=value) | Q(customer_name__icontains=value))

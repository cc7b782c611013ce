import logging
from rest_framework.decorators import api_view
from rest_framework.response import Response
from django.conf import settings
from django.db.models import Sum, DecimalField
from decimal import Decimal

from backend.billing.models import Bill
from backend.catalog.models import Product

logger = logging.getLogger('backend.reports')


def get_dashboard_stats(low_stock_threshold=None):
    """Counts and revenue shown on the dashboard cards"""
    if low_stock_threshold is None:
        low_stock_threshold = settings.LOW_STOCK_THRESHOLD

    total_revenue = Bill.objects.aggregate(
        total=Sum('total_amount', output_field=DecimalField())
    )['total'] or Decimal('0.00')

    return {
        'totalProducts': Product.objects.count(),
        'totalBills': Bill.objects.count(),
        'totalRevenue': float(total_revenue),
        'lowStockProducts': Product.objects.filter(units__lt=low_stock_threshold).count(),
    }


@api_view(['GET'])
def dashboard_stats(request):
    """Dashboard stats: product and bill counts, revenue, low stock count"""
    stats = get_dashboard_stats()
    logger.debug("Dashboard stats: %s", stats)
    return Response(stats)

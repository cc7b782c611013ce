"""Dashboard figures derived from fetched lists"""
from typing import Dict, List

from storeclient.catalog import LOW_STOCK_THRESHOLD, low_stock_products

RECENT_BILLS_LIMIT = 5


def recent_bills(bills: List[Dict], limit: int = RECENT_BILLS_LIMIT) -> List[Dict]:
    """Bills come newest first from the API"""
    return bills[:limit]


def derive_stats(products: List[Dict], bills: List[Dict], threshold: int = LOW_STOCK_THRESHOLD) -> Dict:
    """Same shape as GET /dashboard/stats, computed locally"""
    return {
        'totalProducts': len(products),
        'totalBills': len(bills),
        'totalRevenue': sum(float(bill.get('totalAmount') or 0) for bill in bills),
        'lowStockProducts': len(low_stock_products(products, threshold)),
    }

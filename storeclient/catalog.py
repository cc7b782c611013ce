"""Product list helpers"""
from typing import Dict, List

LOW_STOCK_THRESHOLD = 10


def search_products(products: List[Dict], term: str = '') -> List[Dict]:
    """Case-insensitive substring match on name or category"""
    term = (term or '').lower()
    return [
        product for product in products
        if term in (product.get('name') or '').lower() or term in (product.get('category') or '').lower()
    ]


def is_low_stock(product: Dict, threshold: int = LOW_STOCK_THRESHOLD) -> bool:
    return product.get('units', 0) < threshold


def low_stock_products(products: List[Dict], threshold: int = LOW_STOCK_THRESHOLD) -> List[Dict]:
    return [product for product in products if is_low_stock(product, threshold)]

"""Bill list search and bill drafting"""
from typing import Dict, List, Optional


def search_bills(bills: List[Dict], term: str = '') -> List[Dict]:
    """Case-insensitive substring match on bill number or customer name"""
    term = (term or '').lower()
    return [
        bill for bill in bills
        if term in (bill.get('billNumber') or '').lower() or term in (bill.get('customerName') or '').lower()
    ]


def build_line_item(product: Dict, quantity: int = 1) -> Dict:
    """Draft line for a product at its current price"""
    if quantity < 1:
        raise ValueError('Quantity must be at least 1')
    price = float(product['price'])
    return {
        'productId': product['id'],
        'productName': product['name'],
        'quantity': quantity,
        'unitPrice': price,
        'totalPrice': price * quantity,
    }


def draft_total(items: List[Dict]) -> float:
    return sum(float(item['totalPrice']) for item in items)


def _product_id(item: Dict):
    # Items read back from the API carry the whole product, or None once it is deleted
    product = item.get('productId')
    if isinstance(product, dict):
        return product.get('id')
    return product


def build_bill_payload(customer_name: str, items: List[Dict], customer_phone: str = '',
                       payment_status: str = 'pending', payment_method: str = 'cash') -> Dict:
    """
    Request body for creating or updating a bill.

    Raises ValueError for a blank customer, no items, or an item whose
    product no longer exists.
    """
    customer_name = (customer_name or '').strip()
    if not customer_name:
        raise ValueError('Customer name is required')
    if not items:
        raise ValueError('Add at least one item')

    lines = []
    for item in items:
        product_id = _product_id(item)
        if product_id is None:
            raise ValueError(f"Product for '{item.get('productName')}' no longer exists")
        lines.append({
            'productId': product_id,
            'productName': item.get('productName', ''),
            'quantity': item['quantity'],
            'unitPrice': item['unitPrice'],
        })

    return {
        'customerName': customer_name,
        'customerPhone': (customer_phone or '').strip(),
        'paymentStatus': payment_status,
        'paymentMethod': payment_method,
        'items': lines,
    }


def bill_to_draft(bill: Optional[Dict]) -> Dict:
    """Form state for editing an existing bill, or a blank one"""
    bill = bill or {}
    return {
        'customerName': bill.get('customerName', ''),
        'customerPhone': bill.get('customerPhone') or '',
        'paymentStatus': bill.get('paymentStatus', 'pending'),
        'paymentMethod': bill.get('paymentMethod', 'cash'),
        'items': list(bill.get('items', [])),
    }

"""Customer directory derived from the fetched bill list"""
from typing import Dict, List


def _amount(bill: Dict) -> float:
    return float(bill.get('totalAmount') or 0)


def paid_total(bills: List[Dict]) -> float:
    return sum(_amount(bill) for bill in bills if bill.get('paymentStatus') == 'paid')


def pending_total(bills: List[Dict]) -> float:
    # Anything not fully paid, partial included
    return sum(_amount(bill) for bill in bills if bill.get('paymentStatus') != 'paid')


def group_customers(bills: List[Dict]) -> List[Dict]:
    """
    Group bills by (customerName, customerPhone), keeping first-seen order.

    Each group: name, phone, bills, paidTotal, pendingTotal. A missing phone
    groups with an empty one. The input list is not modified.
    """
    groups = {}
    for bill in bills:
        name = bill.get('customerName') or ''
        phone = bill.get('customerPhone') or ''
        key = (name, phone)
        if key not in groups:
            groups[key] = {'name': name, 'phone': phone, 'bills': []}
        groups[key]['bills'].append(bill)

    customers = []
    for group in groups.values():
        group['paidTotal'] = paid_total(group['bills'])
        group['pendingTotal'] = pending_total(group['bills'])
        customers.append(group)
    return customers


def filter_customers(customers: List[Dict], search: str = '', status: str = 'all') -> List[Dict]:
    """
    Name matches case-insensitively, phone as a plain substring.
    `status` keeps customers with at least one bill in that payment status.
    """
    needle = (search or '').lower()
    result = []
    for customer in customers:
        matches_search = needle in customer['name'].lower() or (search or '') in customer['phone']
        matches_status = status == 'all' or any(
            bill.get('paymentStatus') == status for bill in customer['bills']
        )
        if matches_search and matches_status:
            result.append(customer)
    return result


def summarize_customers(customers: List[Dict]) -> Dict:
    return {
        'customers': len(customers),
        'paidTotal': sum(customer['paidTotal'] for customer in customers),
        'pendingTotal': sum(customer['pendingTotal'] for customer in customers),
    }


def customer_directory(bills: List[Dict], search: str = '', status: str = 'all') -> Dict:
    """Grouped, filtered customers plus their paid/pending summary"""
    customers = filter_customers(group_customers(bills), search=search, status=status)
    summary = summarize_customers(customers)
    summary['results'] = customers
    return summary

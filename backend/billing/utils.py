"""Bill numbering and stock helpers used by bill checkout"""
import logging
from django.db.models import F
from django.utils import timezone
from backend.catalog.models import Product
from .models import Bill, BillSequence

logger = logging.getLogger(__name__)

BILL_NUMBER_PREFIX = 'BILL-'
BILL_SEQUENCE_NAME = 'bill'


def format_bill_number(value):
    """Format a sequence value as a bill number, e.g. 7 -> BILL-000007"""
    return f"{BILL_NUMBER_PREFIX}{value:06d}"


def parse_bill_number(bill_number):
    """Return the numeric part of a bill number, or None if it is not one of ours"""
    if not bill_number or not bill_number.startswith(BILL_NUMBER_PREFIX):
        return None
    suffix = bill_number[len(BILL_NUMBER_PREFIX):]
    return int(suffix) if suffix.isdigit() else None


def _initial_sequence_value():
    # Bill numbers are zero padded, so the lexical maximum is the numeric maximum
    highest = Bill.objects.filter(
        bill_number__startswith=BILL_NUMBER_PREFIX
    ).order_by('-bill_number').values_list('bill_number', flat=True).first()
    return max(parse_bill_number(highest) or 0, Bill.objects.count())


def next_bill_number():
    """
    Allocate the next bill number from the durable counter.

    Must be called inside transaction.atomic(): the counter row stays locked
    until the surrounding transaction commits, and a rollback releases the
    number again.
    """
    sequence, created = BillSequence.objects.select_for_update().get_or_create(
        name=BILL_SEQUENCE_NAME,
        defaults={'last_value': _initial_sequence_value()},
    )
    if created:
        logger.info("Initialised bill sequence at %s", sequence.last_value)
    sequence.last_value += 1
    sequence.save(update_fields=['last_value', 'updated_at'])
    return format_bill_number(sequence.last_value)


def decrement_stock_for_bill(bill):
    """
    Take each item's quantity off its product's units.

    Uses F() updates so concurrent checkouts do not overwrite each other.
    Units may go below zero; there is no availability check at checkout.
    """
    now = timezone.now()
    for item in bill.items.all():
        if item.product_id is None:
            continue
        updated = Product.objects.filter(pk=item.product_id).update(
            units=F('units') - item.quantity,
            updated_at=now,
        )
        if updated:
            logger.info("Stock for product %s reduced by %s (bill %s)", item.product_id, item.quantity, bill.bill_number)
        else:
            logger.warning("Product %s vanished before stock update for bill %s", item.product_id, bill.bill_number)

"""
Django management command to check bills against their line items and
report products whose stock has gone negative
"""
from decimal import Decimal
from django.core.management.base import BaseCommand
from django.db import transaction
from django.db.models import Prefetch
from backend.billing.models import Bill, BillItem, BillSequence
from backend.billing.utils import BILL_SEQUENCE_NAME, parse_bill_number
from backend.catalog.models import Product


class Command(BaseCommand):
    help = 'Check bill totals, dangling product references, the bill counter and negative stock'

    def add_arguments(self, parser):
        parser.add_argument(
            '--bill-id',
            type=int,
            help='Check specific bill ID only',
        )
        parser.add_argument(
            '--fix',
            action='store_true',
            help='Recompute line and bill totals that do not match their items',
        )

    def handle(self, *args, **options):
        bill_id = options.get('bill_id')
        fix = options.get('fix', False)

        self.stdout.write("=" * 80)
        self.stdout.write(self.style.SUCCESS("BILL CONSISTENCY CHECK"))
        self.stdout.write("=" * 80)

        bills = Bill.objects.prefetch_related(
            Prefetch('items', queryset=BillItem.objects.select_related('product'))
        ).order_by('id')
        if bill_id:
            bills = bills.filter(id=bill_id)

        self.stdout.write(f"Total Bills: {bills.count()}")
        self.stdout.write("")

        mismatched = []
        dangling = 0
        for bill in bills:
            items_total = Decimal('0.00')
            bad_lines = []
            for item in bill.items.all():
                line_total = item.get_line_total()
                items_total += line_total
                if item.total_price != line_total:
                    bad_lines.append(item)
                if item.product_id is None:
                    dangling += 1
                    self.stdout.write(self.style.WARNING(
                        f"  {bill.bill_number}: '{item.product_name}' refers to a deleted product"
                    ))
            if bad_lines or bill.total_amount != items_total:
                mismatched.append((bill, bad_lines, items_total))

        for bill, bad_lines, items_total in mismatched:
            self.stdout.write(self.style.ERROR(
                f"  {bill.bill_number}: total {bill.total_amount} != items {items_total}"
                f" ({len(bad_lines)} line(s) off)"
            ))
            if fix:
                with transaction.atomic():
                    for item in bad_lines:
                        item.total_price = item.get_line_total()
                        item.save(update_fields=['total_price'])
                    bill.total_amount = items_total
                    bill.save(update_fields=['total_amount', 'updated_at'])
                self.stdout.write(self.style.SUCCESS(f"    fixed {bill.bill_number}"))

        self._check_sequence()

        negative = Product.objects.filter(units__lt=0).order_by('units')
        for product in negative:
            self.stdout.write(self.style.WARNING(f"  Product {product.id} ({product.name}) has {product.units} units"))

        self.stdout.write("")
        self.stdout.write(f"Mismatched bills: {len(mismatched)}")
        self.stdout.write(f"Items with deleted products: {dangling}")
        self.stdout.write(f"Products with negative stock: {negative.count()}")
        if not mismatched:
            self.stdout.write(self.style.SUCCESS("All bill totals match their items"))

    def _check_sequence(self):
        sequence = BillSequence.objects.filter(name=BILL_SEQUENCE_NAME).first()
        numbers = [parse_bill_number(number) or 0 for number in Bill.objects.values_list('bill_number', flat=True)]
        highest = max(numbers, default=0)
        if sequence is None:
            self.stdout.write(f"Bill counter not started yet (highest bill number {highest})")
        elif sequence.last_value < highest:
            self.stdout.write(self.style.ERROR(
                f"Bill counter at {sequence.last_value} is behind highest bill number {highest}"
            ))
        else:
            self.stdout.write(f"Bill counter at {sequence.last_value}")

"""
Management command to move overdue purchases to OVERDUE.

A purchase is overdue when it is PENDING or ACTIVE, still owes money and
its due date plus the shop's grace days lies before today. Meant to run
once a day from cron.

Usage:
    python manage.py mark_overdue_purchases
    python manage.py mark_overdue_purchases --dry-run
    python manage.py mark_overdue_purchases --date 2024-03-01
"""

from datetime import date

from django.core.management.base import BaseCommand, CommandError
from apps.purchases.services import mark_overdue_purchases


class Command(BaseCommand):
    help = 'Mark purchases past their due date and grace period as OVERDUE'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be updated without making changes',
        )
        parser.add_argument(
            '--date',
            help='Evaluate as of this date (YYYY-MM-DD) instead of today',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        today = None
        if options['date']:
            try:
                today = date.fromisoformat(options['date'])
            except ValueError:
                raise CommandError(f"Invalid date: {options['date']}")

        overdue = mark_overdue_purchases(today=today, dry_run=dry_run)

        if not overdue:
            self.stdout.write(self.style.SUCCESS('No purchases are overdue.'))
            return

        self.stdout.write(f'\nFound {len(overdue)} overdue purchase(s):\n')
        for purchase in overdue:
            customer = purchase.customer
            self.stdout.write(
                f'  - {purchase.purchase_number} | {customer.shop.shop_slug} | {customer.full_name} '
                f'| outstanding {purchase.outstanding_balance} | due {purchase.due_date}'
            )

        if dry_run:
            self.stdout.write(self.style.WARNING('\n--dry-run mode: No changes made.'))
            return

        self.stdout.write(self.style.SUCCESS(f'\nMarked {len(overdue)} purchase(s) as OVERDUE.'))

"""
Management command to expire overdue vouchers.

Active vouchers past their expiration date are otherwise only flipped to
expired when someone tries to redeem them. Run this from cron to keep
status filters and reports accurate.

Usage:
    python manage.py expire_vouchers [--dry-run]
"""

from django.core.management.base import BaseCommand
from django.utils import timezone
from apps.vouchers.models import Voucher, VoucherStatus
from apps.vouchers.services import expire_overdue_vouchers


class Command(BaseCommand):
    help = 'Mark active vouchers past their expiration date as expired'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be expired without making changes',
        )

    def handle(self, *args, **options):
        now = timezone.now()
        overdue = Voucher.objects.filter(
            status=VoucherStatus.ACTIVE,
            expiration_date__lt=now,
        ).select_related('store')

        count = overdue.count()
        if count == 0:
            self.stdout.write(self.style.SUCCESS('No overdue vouchers.'))
            return

        self.stdout.write(f'\nFound {count} overdue voucher(s):\n')
        for voucher in overdue:
            self.stdout.write(
                f'  - {voucher.code} | {voucher.store.name} | {voucher.amount} | '
                f'Expired: {voucher.expiration_date:%Y-%m-%d}'
            )

        if options['dry_run']:
            self.stdout.write(self.style.WARNING('\n--dry-run mode: No changes made.'))
            return

        expired = expire_overdue_vouchers(now=now)
        self.stdout.write(self.style.SUCCESS(f'\nExpired {expired} voucher(s).'))

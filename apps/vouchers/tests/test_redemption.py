import threading
from datetime import timedelta
from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command
from django.db import connection
from django.test import TransactionTestCase
from django.utils import timezone

from apps.accounts.models import User, UserRole
from apps.customers.models import Customer
from apps.products.models import Product
from apps.stores.models import Store
from apps.vouchers.models import Voucher, VoucherStatus
from apps.vouchers.services import (
    redeem_voucher,
    expire_overdue_vouchers,
    VoucherNotFoundError,
    VoucherAlreadyRedeemedError,
    VoucherExpiredError,
    VoucherNotActiveError,
    VoucherRedemptionError,
)
from .conftest import create_voucher_order


@pytest.mark.django_db
class TestRedeemVoucher:

    def test_redeem_active_voucher(self, voucher_order):
        order = redeem_voucher('ACTIVE0001')

        assert order.pk == voucher_order.pk
        voucher = Voucher.objects.get(code='ACTIVE0001')
        assert voucher.status == VoucherStatus.REDEEMED
        assert voucher.is_redeemed is True
        assert voucher.redeemed_at is not None

    def test_returned_order_carries_fresh_voucher(self, voucher_order):
        order = redeem_voucher('ACTIVE0001')
        assert order.voucher.status == VoucherStatus.REDEEMED

    def test_code_is_stripped(self, voucher_order):
        order = redeem_voucher('  ACTIVE0001 ')
        assert order.pk == voucher_order.pk

    def test_second_redeem_fails(self, voucher_order):
        redeem_voucher('ACTIVE0001')
        first_redeemed_at = Voucher.objects.get(code='ACTIVE0001').redeemed_at

        with pytest.raises(VoucherAlreadyRedeemedError):
            redeem_voucher('ACTIVE0001')

        assert Voucher.objects.get(code='ACTIVE0001').redeemed_at == first_redeemed_at

    def test_unknown_code(self, db):
        with pytest.raises(VoucherNotFoundError) as exc:
            redeem_voucher('NOPE000000')
        assert exc.value.status_code == 404

    def test_overdue_voucher_expires_on_attempt(self, expired_voucher_order):
        with pytest.raises(VoucherExpiredError) as exc:
            redeem_voucher('OVERDUE001')

        assert exc.value.status_code == 400
        voucher = Voucher.objects.get(code='OVERDUE001')
        assert voucher.status == VoucherStatus.EXPIRED
        assert voucher.is_redeemed is False

    def test_already_expired_voucher(self, store, product, customer):
        create_voucher_order(
            store, product, customer, code='EXPIRED001', status=VoucherStatus.EXPIRED
        )
        with pytest.raises(VoucherExpiredError):
            redeem_voucher('EXPIRED001')

    def test_redeemed_and_overdue_reports_redeemed(self, store, product, customer):
        create_voucher_order(
            store, product, customer, code='OLDREDEEM1',
            expires_in=-timedelta(days=3),
            status=VoucherStatus.REDEEMED,
            is_redeemed=True,
            redeemed_at=timezone.now() - timedelta(days=5),
        )
        with pytest.raises(VoucherAlreadyRedeemedError):
            redeem_voucher('OLDREDEEM1')

    def test_errors_share_base_class(self):
        for error in (VoucherAlreadyRedeemedError, VoucherExpiredError, VoucherNotActiveError):
            assert issubclass(error, VoucherRedemptionError)
            assert error.status_code == 400


@pytest.mark.django_db
class TestExpireOverdueVouchers:

    def test_only_overdue_active_vouchers_expire(self, voucher_order, expired_voucher_order):
        assert expire_overdue_vouchers() == 1

        assert Voucher.objects.get(code='OVERDUE001').status == VoucherStatus.EXPIRED
        assert Voucher.objects.get(code='ACTIVE0001').status == VoucherStatus.ACTIVE

    def test_nothing_to_expire(self, voucher_order):
        assert expire_overdue_vouchers() == 0

    def test_command_dry_run_changes_nothing(self, expired_voucher_order):
        out = StringIO()
        call_command('expire_vouchers', '--dry-run', stdout=out)

        assert 'OVERDUE001' in out.getvalue()
        assert 'dry-run' in out.getvalue()
        assert Voucher.objects.get(code='OVERDUE001').status == VoucherStatus.ACTIVE

    def test_command_expires(self, expired_voucher_order):
        out = StringIO()
        call_command('expire_vouchers', stdout=out)

        assert 'Expired 1 voucher(s).' in out.getvalue()
        assert Voucher.objects.get(code='OVERDUE001').status == VoucherStatus.EXPIRED

    def test_command_with_nothing_overdue(self, voucher_order):
        out = StringIO()
        call_command('expire_vouchers', stdout=out)
        assert 'No overdue vouchers.' in out.getvalue()


class TestConcurrentRedemption(TransactionTestCase):
    """Competing redemptions of one code must produce exactly one winner."""

    def setUp(self):
        manager = User.objects.create_user(
            email='race@example.com',
            password='TestPass123!',
            role=UserRole.STORE_MANAGER,
        )
        store = Store.objects.create(owner=manager, name='Race Store', email='race@store.example')
        product = Product.objects.create(store=store, name='Espresso', price=Decimal('3.50'))
        customer = Customer.objects.create(
            full_name='Race Customer',
            email='racer@example.com',
            phone_number='+1 555 0199',
            address='9 Fast Lane',
            city='Speedville',
            zip_code='99999',
            country='US',
        )
        self.order = create_voucher_order(store, product, customer, code='RACE000001')

    def test_concurrent_redeem_has_single_winner(self):
        results = []
        errors = []

        def attempt_redeem():
            try:
                order = redeem_voucher('RACE000001')
                results.append(order.pk)
            except VoucherAlreadyRedeemedError as e:
                errors.append(e)
            finally:
                connection.close()

        threads = [threading.Thread(target=attempt_redeem) for _ in range(5)]

        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results == [self.order.pk]
        assert len(errors) == 4

        voucher = Voucher.objects.get(code='RACE000001')
        assert voucher.status == VoucherStatus.REDEEMED
        assert voucher.is_redeemed is True

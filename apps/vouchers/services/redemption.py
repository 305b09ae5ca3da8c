"""
Voucher redemption state machine.

A voucher is redeemed by one conditional UPDATE guarded on
``status=active`` and an unexpired ``expiration_date``. The database
serialises competing writers, so of any number of concurrent attempts on
the same code exactly one sees a matched row. When nothing matched, a
follow-up read works out why.
"""

import logging

from django.utils import timezone

from ..models import Voucher, VoucherStatus
from .exceptions import (
    VoucherNotFoundError,
    VoucherAlreadyRedeemedError,
    VoucherExpiredError,
    VoucherNotActiveError,
)

logger = logging.getLogger(__name__)


def _raise_redemption_failure(code, now):
    """Classify why ``code`` could not be redeemed and raise the matching error."""
    try:
        voucher = Voucher.objects.get(code=code)
    except Voucher.DoesNotExist:
        raise VoucherNotFoundError()

    if voucher.status == VoucherStatus.REDEEMED:
        raise VoucherAlreadyRedeemedError()

    if voucher.status == VoucherStatus.EXPIRED:
        raise VoucherExpiredError()

    if voucher.status == VoucherStatus.ACTIVE and voucher.expiration_date < now:
        Voucher.objects.filter(
            pk=voucher.pk,
            status=VoucherStatus.ACTIVE,
        ).update(status=VoucherStatus.EXPIRED, updated_at=now)
        logger.info("Voucher %s expired on redemption attempt", code)
        raise VoucherExpiredError()

    raise VoucherNotActiveError()


def redeem_voucher(code: str):
    """
    Redeem the voucher with ``code`` and return its order.

    Args:
        code: Voucher code as printed on the voucher

    Returns:
        The Order owning the voucher, with ``order.voucher`` reloaded.

    Raises:
        VoucherNotFoundError: No voucher has this code (404)
        VoucherAlreadyRedeemedError: Redeemed before (400)
        VoucherExpiredError: Past its expiration date (400)
        VoucherNotActiveError: Any other non-active state (400)
    """
    code = (code or '').strip()
    now = timezone.now()

    updated = Voucher.objects.filter(
        code=code,
        status=VoucherStatus.ACTIVE,
        expiration_date__gte=now,
    ).update(
        status=VoucherStatus.REDEEMED,
        is_redeemed=True,
        redeemed_at=now,
        updated_at=now,
    )

    if not updated:
        logger.info("Redemption of voucher %s rejected", code)
        _raise_redemption_failure(code, now)

    voucher = (
        Voucher.objects
        .select_related('order', 'order__customer', 'store', 'product')
        .get(code=code)
    )
    logger.info("Voucher %s redeemed for order %s", code, voucher.order_id)
    return voucher.order


def expire_overdue_vouchers(*, now=None) -> int:
    """
    Flip every active voucher past its expiration date to expired.

    Returns:
        Number of vouchers expired.
    """
    now = now or timezone.now()
    count = Voucher.objects.filter(
        status=VoucherStatus.ACTIVE,
        expiration_date__lt=now,
    ).update(status=VoucherStatus.EXPIRED, updated_at=now)

    if count:
        logger.info("Expired %d overdue voucher(s)", count)
    return count

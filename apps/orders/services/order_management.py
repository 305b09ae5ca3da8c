"""Order lifecycle: creation, lookups, updates, redemption."""

import logging
from functools import partial

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.vouchers.models import Voucher, VoucherStatus
from apps.vouchers.services import (
    VoucherCodeConflictError,
    VoucherNotFoundError,
    build_qr_payload,
    generate_qr_data_uri,
    generate_unique_code,
    redeem_voucher as redeem_voucher_code,
)
from .. import tasks
from ..models import Order
from .exceptions import OrderNotFoundError
from .order_validation import validate_order_data, validate_order_update
from .pdf_rendering import voucher_pdf_path

logger = logging.getLogger(__name__)

ORDER_RELATIONS = ('customer', 'voucher', 'voucher__store', 'voucher__product')


def create_order(*, data) -> Order:
    """
    Create an order and its voucher.

    The payload is validated in full, a unique voucher code is assigned
    unless the caller supplied one, the QR code is generated and order and
    voucher are written in one transaction. PDF generation and the voucher
    emails are handed to the background worker once that transaction
    commits, so this returns without waiting for them.

    Args:
        data: Request payload with ``customer``, ``payment_details``
            and ``voucher``

    Returns:
        The new Order with its active voucher.

    Raises:
        OrderValidationError: Listing every invalid field
        VoucherCodeConflictError: If a supplied code is already taken
    """
    validated = validate_order_data(data)
    payment = dict(validated['payment_details'])
    voucher_data = dict(validated['voucher'])

    code = voucher_data.pop('code', None)
    generated = not code
    if generated:
        code = generate_unique_code()
    elif Voucher.objects.filter(code=code).exists():
        raise VoucherCodeConflictError()

    # A generated code can still lose a race with a concurrent insert;
    # such a code is drawn again once before giving up.
    for attempt in range(2):
        qr_code = generate_qr_data_uri(build_qr_payload(code))
        try:
            with transaction.atomic():
                order = Order.objects.create(customer=validated['customer'], **payment)
                Voucher.objects.create(
                    order=order,
                    code=code,
                    status=VoucherStatus.ACTIVE,
                    is_redeemed=False,
                    amount=payment['amount'],
                    qr_code=qr_code,
                    **voucher_data,
                )
                transaction.on_commit(partial(tasks.submit_order_fulfilment, order.pk))
            break
        except IntegrityError as e:
            if not generated or attempt:
                raise VoucherCodeConflictError() from e
            logger.warning("Voucher code %s was taken concurrently, drawing another", code)
            code = generate_unique_code()

    logger.info("Order %s created with voucher %s", order.pk, code)
    return get_order(order.pk)


def get_order(order_id) -> Order:
    """
    Raises:
        OrderNotFoundError: If no order has this id
    """
    try:
        return Order.objects.select_related(*ORDER_RELATIONS).get(pk=order_id)
    except (Order.DoesNotExist, DjangoValidationError, ValueError):
        raise OrderNotFoundError()


def list_orders(
    *,
    customer_id=None,
    store_id=None,
    status=None,
    sender_email=None,
    receiver_email=None,
) -> QuerySet:
    """
    Orders newest first.

    Optional filters: customer, store, voucher status and the voucher's
    sender or receiver address (case-insensitive).
    """
    queryset = Order.objects.select_related(*ORDER_RELATIONS)
    if customer_id:
        queryset = queryset.filter(customer_id=customer_id)
    if store_id:
        queryset = queryset.filter(voucher__store_id=store_id)
    if status:
        queryset = queryset.filter(voucher__status=status)
    if sender_email:
        queryset = queryset.filter(voucher__sender_email__iexact=sender_email)
    if receiver_email:
        queryset = queryset.filter(voucher__receiver_email__iexact=receiver_email)
    return queryset.order_by('-created_at')


def get_order_by_voucher_code(code: str) -> Order:
    """
    Raises:
        VoucherNotFoundError: If no voucher has this code
    """
    try:
        return Order.objects.select_related(*ORDER_RELATIONS).get(voucher__code=code)
    except Order.DoesNotExist:
        raise VoucherNotFoundError()


@transaction.atomic
def update_order(*, order_id, data) -> Order:
    """
    Update the payment status and the editable voucher fields.

    Redemption state (status, is_redeemed, redeemed_at) and the code are
    never touched here.

    Raises:
        OrderNotFoundError: If the order does not exist
        OrderValidationError: If the update payload is invalid
    """
    changes = validate_order_update(data)
    try:
        order = Order.objects.select_for_update().get(pk=order_id)
    except (Order.DoesNotExist, DjangoValidationError, ValueError):
        raise OrderNotFoundError()

    if 'payment_status' in changes:
        order.payment_status = changes['payment_status']
        order.save(update_fields=['payment_status', 'updated_at'])

    voucher_changes = changes.get('voucher') or {}
    if voucher_changes:
        Voucher.objects.filter(order=order).update(updated_at=timezone.now(), **voucher_changes)
        # The stored PDF shows the old text now
        order.pdf_generated = False
        order.save(update_fields=['pdf_generated', 'updated_at'])

    logger.info("Order %s updated: %s", order.pk, ', '.join(changes))
    return get_order(order.pk)


def delete_order(*, order_id) -> None:
    """
    Delete an order, its voucher and its stored PDF.

    Raises:
        OrderNotFoundError: If the order does not exist
    """
    order = get_order(order_id)
    code = order.voucher.code if hasattr(order, 'voucher') else None

    order.delete()

    if code:
        voucher_pdf_path(code).unlink(missing_ok=True)
    logger.info("Order %s deleted", order_id)


def redeem_voucher(code: str) -> Order:
    """
    Redeem a voucher by code and return its order.

    Raises:
        VoucherNotFoundError, VoucherAlreadyRedeemedError,
        VoucherExpiredError, VoucherNotActiveError
    """
    order = redeem_voucher_code(code)
    return get_order(order.pk)

"""
Voucher notification emails.

Three emails go out per order, each with the voucher PDF attached:
the store is told about the sale, the receiver gets the gift and the
sender gets a purchase confirmation.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from pathlib import Path

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils import timezone
from django.utils.html import strip_tags

from ..models import Order
from .exceptions import OrderNotFoundError, VoucherEmailError
from .pdf_rendering import voucher_pdf_filename

logger = logging.getLogger(__name__)


def load_order_for_email(order_id) -> Order:
    """Order with everything the email templates touch already joined in."""
    try:
        return Order.objects.select_related(
            'customer',
            'voucher',
            'voucher__store',
            'voucher__product',
        ).get(pk=order_id)
    except Order.DoesNotExist:
        raise OrderNotFoundError()


def _email_context(order, store=None):
    voucher = order.voucher
    return {
        'order': order,
        'voucher': voucher,
        'store': store or voucher.store,
        'product': voucher.product,
        'amount': f"{settings.VOUCHER_CURRENCY_SYMBOL}{voucher.amount:,.2f}",
        'expiration_date': timezone.localtime(voucher.expiration_date).strftime(
            settings.VOUCHER_DATE_FORMAT
        ),
    }


def _send(*, recipient, subject, template_name, context, pdf_path, code, label):
    if not recipient:
        raise VoucherEmailError(f"{label} email address is missing")

    html_body = render_to_string(template_name, context)
    message = EmailMultiAlternatives(
        subject=subject,
        body=strip_tags(html_body),
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[recipient],
    )
    message.attach_alternative(html_body, 'text/html')
    message.attach(voucher_pdf_filename(code), Path(pdf_path).read_bytes(), 'application/pdf')

    try:
        message.send(fail_silently=False)
    except Exception as e:
        raise VoucherEmailError(f"Failed to send email to {label}: {e}") from e

    logger.info("Voucher email for order %s sent to %s (%s)", context['order'].pk, label, recipient)


def send_store_email(order, store, pdf_path):
    """Tell the store a voucher was sold. Raises VoucherEmailError."""
    _send(
        recipient=store.email if store else None,
        subject='A new voucher has been purchased!',
        template_name='emails/voucher_store.html',
        context=_email_context(order, store),
        pdf_path=pdf_path,
        code=order.voucher.code,
        label='store',
    )


def send_receiver_email(order, pdf_path):
    """Deliver the voucher to its receiver. Raises VoucherEmailError."""
    voucher = order.voucher
    _send(
        recipient=voucher.receiver_email,
        subject=f"You've received a gift voucher from {voucher.sender_name}!",
        template_name='emails/voucher_receiver.html',
        context=_email_context(order),
        pdf_path=pdf_path,
        code=voucher.code,
        label='receiver',
    )


def send_customer_email(order, pdf_path):
    """Confirm the purchase to the sender. Raises VoucherEmailError."""
    _send(
        recipient=order.voucher.sender_email,
        subject='Your gift voucher purchase confirmation',
        template_name='emails/voucher_customer.html',
        context=_email_context(order),
        pdf_path=pdf_path,
        code=order.voucher.code,
        label='customer',
    )


def send_all_voucher_emails(order_id, pdf_path) -> bool:
    """
    Send the store, receiver and customer emails concurrently.

    All three sends are attempted and awaited even when some fail. One or
    two failures are logged per recipient and still count as delivered:
    ``emails_sent`` is set and True returned. If all three fail the flag
    is left alone and False is returned.

    Args:
        order_id: Primary key of the order
        pdf_path: Voucher PDF to attach

    Returns:
        True if at least one email went out.

    Raises:
        OrderNotFoundError: If the order does not exist
    """
    order = load_order_for_email(order_id)
    store = order.voucher.store

    if not pdf_path or not Path(pdf_path).is_file():
        logger.error("Voucher PDF for order %s not found at %s, no emails sent", order.pk, pdf_path)
        return False

    sends = {
        'store': lambda: send_store_email(order, store, pdf_path),
        'receiver': lambda: send_receiver_email(order, pdf_path),
        'customer': lambda: send_customer_email(order, pdf_path),
    }
    with ThreadPoolExecutor(max_workers=len(sends), thread_name_prefix='voucher-email') as pool:
        futures = {label: pool.submit(send) for label, send in sends.items()}
        wait(futures.values())

    failed = []
    for label, future in futures.items():
        error = future.exception()
        if error is not None:
            failed.append(label)
            logger.error("Voucher email for order %s to %s failed: %s", order.pk, label, error)

    if len(failed) == len(sends):
        logger.error("All voucher emails failed for order %s", order.pk)
        return False

    Order.objects.filter(pk=order.pk).update(emails_sent=True, updated_at=timezone.now())
    if failed:
        logger.warning(
            "Voucher emails for order %s partially sent, failed: %s", order.pk, ', '.join(failed)
        )
    else:
        logger.info("All voucher emails sent for order %s", order.pk)
    return True

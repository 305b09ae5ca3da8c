"""
Post-purchase fulfilment: voucher PDF first, then the emails.

Used by the background task after an order commits and by the resend
and download endpoints. Only a missing order is reported as an error;
everything else is logged and turned into ``None``/``False``.
"""

import logging
from pathlib import Path
from typing import Optional

from .exceptions import VoucherEmailError, VoucherPdfError
from .order_management import get_order
from .pdf_rendering import render_voucher_pdf, voucher_pdf_path
from .voucher_emails import (
    send_all_voucher_emails,
    send_customer_email,
    send_receiver_email,
    send_store_email,
)

logger = logging.getLogger(__name__)


def ensure_voucher_pdf(order) -> Optional[Path]:
    """
    Path of the order's voucher PDF, rendering it first if needed.

    Returns:
        The PDF path, or None if it could not be generated.
    """
    path = voucher_pdf_path(order.voucher.code)
    if order.pdf_generated and path.is_file():
        return path

    if render_voucher_pdf(order.pk) is None:
        return None
    return path


def fulfil_order(order_id) -> bool:
    """
    Generate the voucher PDF and send the three voucher emails.

    Runs in the background after an order is created. Never raises.
    """
    try:
        order = get_order(order_id)
        pdf_path = ensure_voucher_pdf(order)
        if pdf_path is None:
            logger.error("Fulfilment of order %s stopped: no voucher PDF", order_id)
            return False
        return send_all_voucher_emails(order.pk, pdf_path)
    except Exception:
        logger.exception("Fulfilment of order %s failed", order_id)
        return False


def resend_voucher_emails(order_id) -> bool:
    """
    Send all three voucher emails again.

    Raises:
        OrderNotFoundError: If the order does not exist
    """
    order = get_order(order_id)
    try:
        pdf_path = ensure_voucher_pdf(order)
        if pdf_path is None:
            return False
        return send_all_voucher_emails(order.pk, pdf_path)
    except Exception:
        logger.exception("Resending voucher emails for order %s failed", order_id)
        return False


def _resend_one(order_id, label, send) -> bool:
    order = get_order(order_id)
    try:
        pdf_path = ensure_voucher_pdf(order)
        if pdf_path is None:
            return False
        send(order, pdf_path)
    except VoucherEmailError as e:
        logger.error("Resending %s email for order %s failed: %s", label, order_id, e)
        return False
    except Exception:
        logger.exception("Resending %s email for order %s failed", label, order_id)
        return False
    return True


def resend_customer_email(order_id) -> bool:
    """Resend only the purchase confirmation to the sender."""
    return _resend_one(order_id, 'customer', send_customer_email)


def resend_receiver_email(order_id) -> bool:
    """Resend only the gift email to the receiver."""
    return _resend_one(order_id, 'receiver', send_receiver_email)


def resend_store_email(order_id) -> bool:
    """Resend only the sale notification to the store."""
    return _resend_one(
        order_id,
        'store',
        lambda order, pdf_path: send_store_email(order, order.voucher.store, pdf_path),
    )


def get_voucher_pdf(order_id) -> Path:
    """
    Voucher PDF of an order for download, generated on demand.

    Raises:
        OrderNotFoundError: If the order does not exist
        VoucherPdfError: If the PDF could not be generated
    """
    order = get_order(order_id)
    pdf_path = ensure_voucher_pdf(order)
    if pdf_path is None:
        raise VoucherPdfError(f"Could not generate voucher PDF for order {order_id}")
    return pdf_path

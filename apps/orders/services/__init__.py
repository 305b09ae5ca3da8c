"""Services for order business logic."""

from .exceptions import (
    OrderServiceError,
    VoucherPdfError,
    VoucherEmailError,
    OrderValidationError,
    OrderNotFoundError,
    StoreNotFoundError,
    ProductNotFoundError,
)
from .order_management import (
    create_order,
    get_order,
    list_orders,
    get_order_by_voucher_code,
    update_order,
    delete_order,
    redeem_voucher,
)
from .pdf_rendering import render_voucher_pdf, voucher_pdf_path
from .voucher_emails import (
    send_store_email,
    send_receiver_email,
    send_customer_email,
    send_all_voucher_emails,
)
from .fulfilment import (
    ensure_voucher_pdf,
    fulfil_order,
    resend_voucher_emails,
    resend_customer_email,
    resend_receiver_email,
    resend_store_email,
    get_voucher_pdf,
)

__all__ = [
    # Exceptions
    'OrderServiceError',
    'VoucherPdfError',
    'VoucherEmailError',
    'OrderValidationError',
    'OrderNotFoundError',
    'StoreNotFoundError',
    'ProductNotFoundError',
    # Order management
    'create_order',
    'get_order',
    'list_orders',
    'get_order_by_voucher_code',
    'update_order',
    'delete_order',
    'redeem_voucher',
    # PDF
    'render_voucher_pdf',
    'voucher_pdf_path',
    # Emails
    'send_store_email',
    'send_receiver_email',
    'send_customer_email',
    'send_all_voucher_emails',
    # Fulfilment
    'ensure_voucher_pdf',
    'fulfil_order',
    'resend_voucher_emails',
    'resend_customer_email',
    'resend_receiver_email',
    'resend_store_email',
    'get_voucher_pdf',
]

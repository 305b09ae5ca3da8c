"""Services for voucher codes, QR images and redemption."""

from .exceptions import (
    VoucherServiceError,
    QRCodeError,
    VoucherNotFoundError,
    VoucherCodeConflictError,
    VoucherRedemptionError,
    VoucherAlreadyRedeemedError,
    VoucherExpiredError,
    VoucherNotActiveError,
)
from .code_generation import generate_code, generate_unique_code
from .qr_codes import build_qr_payload, generate_qr_data_uri
from .redemption import redeem_voucher, expire_overdue_vouchers

__all__ = [
    # Exceptions
    'VoucherServiceError',
    'QRCodeError',
    'VoucherNotFoundError',
    'VoucherCodeConflictError',
    'VoucherRedemptionError',
    'VoucherAlreadyRedeemedError',
    'VoucherExpiredError',
    'VoucherNotActiveError',
    # Code generation
    'generate_code',
    'generate_unique_code',
    # QR codes
    'build_qr_payload',
    'generate_qr_data_uri',
    # Redemption
    'redeem_voucher',
    'expire_overdue_vouchers',
]

"""
Domain exceptions for the vouchers app.

Redemption failures are API exceptions so views can let them propagate;
generator failures are plain service errors.
"""
from rest_framework.exceptions import APIException


class VoucherServiceError(Exception):
    """Base exception for voucher service errors."""
    pass


class QRCodeError(VoucherServiceError):
    """Raised when a QR code image cannot be produced."""
    pass


class VoucherNotFoundError(APIException):
    """No voucher carries the given code."""
    status_code = 404
    default_detail = 'Voucher not found.'
    default_code = 'voucher_not_found'


class VoucherCodeConflictError(APIException):
    """A caller-supplied voucher code is already taken."""
    status_code = 409
    default_detail = 'A voucher with this code already exists.'
    default_code = 'voucher_code_conflict'


class VoucherRedemptionError(APIException):
    """Base for every rejected redemption of an existing voucher."""
    status_code = 400
    default_detail = 'Voucher cannot be redeemed.'
    default_code = 'voucher_not_redeemable'


class VoucherAlreadyRedeemedError(VoucherRedemptionError):
    default_detail = 'Voucher has already been redeemed.'
    default_code = 'voucher_already_redeemed'


class VoucherExpiredError(VoucherRedemptionError):
    default_detail = 'Voucher has expired.'
    default_code = 'voucher_expired'


class VoucherNotActiveError(VoucherRedemptionError):
    default_detail = 'Voucher is not active.'
    default_code = 'voucher_not_active'

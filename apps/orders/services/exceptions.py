"""
Domain exceptions for the orders app.

HTTP-facing errors are DRF exceptions; PDF and email failures stay inside
the services, where they are logged and turned into ``None``/``False``.
"""
from rest_framework.exceptions import APIException, ValidationError


class OrderServiceError(Exception):
    """Base exception for order service errors."""
    pass


class VoucherPdfError(OrderServiceError):
    """Raised when a voucher PDF cannot be produced or stored."""
    pass


class VoucherEmailError(OrderServiceError):
    """Raised when one voucher email cannot be sent."""
    pass


class OrderValidationError(ValidationError):
    """Order input broke one or more rules; ``detail`` lists every field."""
    default_detail = 'Invalid order data.'
    default_code = 'order_invalid'
    message = 'Order validation failed'


class OrderNotFoundError(APIException):
    """Order not found."""
    status_code = 404
    default_detail = 'Order not found.'
    default_code = 'order_not_found'


class StoreNotFoundError(APIException):
    """Store referenced by a voucher no longer exists."""
    status_code = 404
    default_detail = 'Store not found.'
    default_code = 'store_not_found'


class ProductNotFoundError(APIException):
    """Product referenced by a voucher no longer exists."""
    status_code = 404
    default_detail = 'Product not found.'
    default_code = 'product_not_found'

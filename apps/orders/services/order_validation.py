"""Validation of incoming order data."""

from ..serializers import OrderCreateInputSerializer, OrderUpdateInputSerializer
from .exceptions import OrderValidationError


def validate_order_data(data) -> dict:
    """
    Validate a new order payload.

    Returns:
        The validated data (customer/store/product resolved to instances).

    Raises:
        OrderValidationError: With every violated field, not just the first
    """
    serializer = OrderCreateInputSerializer(data=data)
    if not serializer.is_valid():
        raise OrderValidationError(serializer.errors)
    return serializer.validated_data


def validate_order_update(data) -> dict:
    serializer = OrderUpdateInputSerializer(data=data)
    if not serializer.is_valid():
        raise OrderValidationError(serializer.errors)
    return serializer.validated_data

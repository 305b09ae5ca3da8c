from rest_framework.exceptions import APIException


class CustomerHasOrdersError(APIException):
    """Customers are kept as long as any order references them."""
    status_code = 409
    default_detail = 'Customer has orders and cannot be deleted.'
    default_code = 'customer_has_orders'

"""
Domain-specific exceptions for accounts services.

Errors a client can act on are DRF exceptions and render through the
project exception handler; UserNotFoundError stays internal so password
reset never reveals which emails are registered.
"""
from rest_framework.exceptions import APIException


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class UserNotFoundError(AccountsServiceError):
    """Raised when user does not exist."""
    pass


class UserRegistrationError(APIException):
    status_code = 400
    default_detail = 'Registration failed.'
    default_code = 'registration_failed'


class InvalidCredentialsError(APIException):
    status_code = 401
    default_detail = 'Invalid email or password.'
    default_code = 'invalid_credentials'


class InactiveAccountError(APIException):
    status_code = 403
    default_detail = 'Account is deactivated.'
    default_code = 'account_inactive'


class InvalidTokenError(APIException):
    """Password reset token is unknown or expired."""
    status_code = 400
    default_detail = 'Invalid or expired reset token.'
    default_code = 'invalid_token'


class AdminAlreadyExistsError(APIException):
    """Bootstrap endpoint is closed once an admin exists."""
    status_code = 403
    default_detail = 'Setup already completed.'
    default_code = 'setup_completed'

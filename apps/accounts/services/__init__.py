"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidTokenError,
    UserNotFoundError,
    AdminAlreadyExistsError,
)
from .user_registration import create_account, register_user
from .user_authentication import authenticate_user
from .user_management import create_user, update_user, deactivate_user, setup_first_admin
from .password_reset import request_password_reset, confirm_password_reset

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'InvalidTokenError',
    'UserNotFoundError',
    'AdminAlreadyExistsError',
    # Registration and authentication
    'create_account',
    'register_user',
    'authenticate_user',
    # User management
    'create_user',
    'update_user',
    'deactivate_user',
    'setup_first_admin',
    # Password reset
    'request_password_reset',
    'confirm_password_reset',
]

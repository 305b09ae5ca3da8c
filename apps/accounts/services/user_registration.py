"""User registration service."""

import logging

from django.db import IntegrityError, transaction
from django.contrib.auth import get_user_model

from ..models import UserRole
from .exceptions import UserRegistrationError

User = get_user_model()
logger = logging.getLogger(__name__)


def create_account(*, email: str, password: str, display_name: str = "", role: str) -> User:
    """
    Create a user with the given role.

    Raises:
        UserRegistrationError: If the email is already taken
    """
    if User.objects.filter(email__iexact=email).exists():
        raise UserRegistrationError(f"An account with email {email} already exists")

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                password=password,
                display_name=display_name,
                role=role,
            )
    except IntegrityError as e:
        raise UserRegistrationError(f"Registration failed: {e}") from e

    logger.info("Created user %s with role %s", user.id, user.role)
    return user


def register_user(*, email: str, password: str, display_name: str = "") -> User:
    """
    Self-service sign-up.

    Always creates a customer. Store managers and admins are provisioned
    by an admin through the user management endpoints.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        display_name: Optional display name

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email is taken
    """
    return create_account(
        email=email,
        password=password,
        display_name=display_name,
        role=UserRole.CUSTOMER,
    )

"""Admin-side user management and first-admin bootstrap."""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction

from ..models import UserRole
from .exceptions import AdminAlreadyExistsError
from .user_registration import create_account

User = get_user_model()
logger = logging.getLogger(__name__)


def create_user(
    *,
    email: str,
    password: str,
    display_name: str = "",
    role: str = UserRole.CUSTOMER,
) -> User:
    """
    Create an account of any role. Admin only.

    Admin accounts also get ``is_staff`` so they can use the Django admin.
    """
    user = create_account(email=email, password=password, display_name=display_name, role=role)
    if role == UserRole.ADMIN:
        user.is_staff = True
        user.save(update_fields=['is_staff'])
    return user


def update_user(*, user, data: dict) -> User:
    """Apply display name, role, active flag and optional new password."""
    password = data.pop('password', None)
    for field, value in data.items():
        setattr(user, field, value)
    if 'role' in data:
        user.is_staff = user.role == UserRole.ADMIN or user.is_superuser
    if password:
        user.set_password(password)
    user.save()

    logger.info("User %s updated: %s", user.id, ', '.join(sorted(data)) or 'password')
    return user


def deactivate_user(*, user) -> User:
    """Users own stores and orders, so they are deactivated rather than deleted."""
    user.is_active = False
    user.save(update_fields=['is_active', 'updated_at'])
    logger.info("User %s deactivated", user.id)
    return user


@transaction.atomic
def setup_first_admin(*, email: str, password: str, display_name: str = "") -> User:
    """
    Create the first admin of a fresh installation.

    Raises:
        AdminAlreadyExistsError: Once any admin exists (403)
    """
    if User.objects.filter(role=UserRole.ADMIN).exists():
        raise AdminAlreadyExistsError()

    user = create_user(
        email=email,
        password=password,
        display_name=display_name,
        role=UserRole.ADMIN,
    )
    logger.info("First admin %s created", user.id)
    return user

"""Password reset service."""

import logging
import secrets
from datetime import timedelta

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.mail import send_mail
from django.db import transaction
from django.utils import timezone

from .exceptions import UserNotFoundError, InvalidTokenError

User = get_user_model()
logger = logging.getLogger(__name__)

RESET_TOKEN_LIFETIME = timedelta(hours=1)


def send_password_reset_email(user, reset_token):
    """Email the reset token; failures are logged, never raised."""
    try:
        send_mail(
            subject='Password reset request',
            message=(
                f"Hello {user.get_display_name()},\n\n"
                f"Use this token to reset your password: {reset_token}\n"
                f"It expires in {int(RESET_TOKEN_LIFETIME.total_seconds() // 60)} minutes.\n\n"
                "If you didn't request this, you can ignore this email."
            ),
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[user.email],
            fail_silently=False,
        )
    except Exception:
        logger.exception("Failed to send password reset email to user %s", user.id)
        return False
    return True


@transaction.atomic
def request_password_reset(*, email: str) -> str:
    """
    Generate a password reset token and email it after commit.

    Returns:
        Reset token

    Raises:
        UserNotFoundError: If no active user has this email
    """
    try:
        user = (
            User.objects
            .select_for_update()
            .get(email__iexact=email, is_active=True)
        )
    except User.DoesNotExist:
        raise UserNotFoundError(f"No active user with email: {email}")

    reset_token = secrets.token_urlsafe(32)
    user.reset_token = reset_token
    user.reset_token_expires_at = timezone.now() + RESET_TOKEN_LIFETIME
    user.save(update_fields=['reset_token', 'reset_token_expires_at'])

    transaction.on_commit(lambda: send_password_reset_email(user, reset_token))

    return reset_token


@transaction.atomic
def confirm_password_reset(*, token: str, new_password: str) -> User:
    """
    Reset user password with token.

    Raises:
        InvalidTokenError: If token is invalid or expired
    """
    try:
        user = (
            User.objects
            .select_for_update()
            .get(reset_token=token, is_active=True)
        )
    except User.DoesNotExist:
        raise InvalidTokenError()

    if user.reset_token_expires_at is None or user.reset_token_expires_at < timezone.now():
        raise InvalidTokenError()

    user.set_password(new_password)
    user.reset_token = None
    user.reset_token_expires_at = None
    user.save(update_fields=['password', 'reset_token', 'reset_token_expires_at'])

    return user

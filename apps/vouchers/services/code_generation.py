"""Voucher code generation."""

import logging
import secrets
import string
import time
from typing import Optional

from django.conf import settings

from ..models import Voucher

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
BASE36_DIGITS = string.digits + string.ascii_uppercase


def generate_code(length: Optional[int] = None) -> str:
    """Return a random code over A-Z and 0-9 drawn from the ``secrets`` CSPRNG."""
    if length is None:
        length = settings.VOUCHER_CODE_LENGTH
    if length < 1:
        raise ValueError("Code length must be positive")
    return ''.join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def _base36(number: int) -> str:
    if number == 0:
        return '0'
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_DIGITS[remainder])
    return ''.join(reversed(digits))


def generate_unique_code(
    *,
    length: Optional[int] = None,
    max_attempts: Optional[int] = None,
) -> str:
    """
    Generate a voucher code no existing voucher uses.

    Candidates are checked against the vouchers table. After ``max_attempts``
    collisions the last candidate gets a base-36 millisecond timestamp suffix
    and is returned as is, so the call is bounded and never fails. The unique
    index on ``Voucher.code`` still guards the insert itself.

    Args:
        length: Code length, defaults to settings.VOUCHER_CODE_LENGTH
        max_attempts: Collision budget, defaults to settings.VOUCHER_CODE_MAX_ATTEMPTS

    Returns:
        The code to assign.
    """
    if max_attempts is None:
        max_attempts = settings.VOUCHER_CODE_MAX_ATTEMPTS

    candidate = generate_code(length)
    for attempt in range(1, max_attempts + 1):
        if attempt > 1:
            candidate = generate_code(length)
        if not Voucher.objects.filter(code=candidate).exists():
            return candidate
        logger.debug("Voucher code collision on attempt %d", attempt)

    fallback = f"{candidate}{_base36(int(time.time() * 1000))}"
    logger.warning(
        "No free voucher code after %d attempts, using timestamp fallback", max_attempts
    )
    return fallback

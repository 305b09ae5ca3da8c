"""QR codes printed on vouchers."""

import base64
from io import BytesIO

import qrcode
from django.conf import settings

from .exceptions import QRCodeError


def build_qr_payload(code: str) -> str:
    """What the QR encodes: the redemption URL prefix (if configured) plus the code."""
    return f"{settings.VOUCHER_QR_BASE_URL or ''}{code}"


def generate_qr_data_uri(payload: str) -> str:
    """
    Render ``payload`` as a PNG QR code and return it as a data URI.

    Uses error correction level H (30% recovery) so a printed voucher
    still scans when partly damaged, and a one-module quiet zone.

    Raises:
        QRCodeError: If the payload cannot be encoded.
    """
    try:
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_H,
            box_size=10,
            border=1,
        )
        qr.add_data(payload)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")
        buffer = BytesIO()
        img.save(buffer)
    except Exception as e:
        raise QRCodeError(f"Failed to generate QR code: {e}") from e

    encoded = base64.b64encode(buffer.getvalue()).decode('ascii')
    return f"data:image/png;base64,{encoded}"

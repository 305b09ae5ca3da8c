"""
Voucher PDF rendering.

Each voucher template is an HTML file with ``{{token}}`` placeholders. The
placeholders are filled by plain substitution (no template-engine logic),
the result is printed to an A4 PDF with WeasyPrint and stored as
``voucher-{code}.pdf`` under ``VOUCHER_PDF_DIR``.
"""

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from django.conf import settings
from django.template import TemplateDoesNotExist
from django.template.loader import get_template
from django.utils import timezone
from django.utils.html import escape

from apps.products.models import Product
from apps.stores.models import Store
from ..models import Order
from .exceptions import (
    OrderNotFoundError,
    StoreNotFoundError,
    ProductNotFoundError,
    VoucherPdfError,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r'\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}')
PAGE_STYLESHEET = '@page { size: A4; margin: 20px; }'
PDF_MAGIC = b'%PDF-'


def voucher_pdf_filename(code: str) -> str:
    return f"voucher-{code}.pdf"


def voucher_pdf_path(code: str) -> Path:
    """Where the PDF for ``code`` lives on disk."""
    return Path(settings.VOUCHER_PDF_DIR) / voucher_pdf_filename(code)


def voucher_pdf_url(code: str) -> str:
    """The media-relative reference stored on ``Order.pdf_url``."""
    return f"vouchers/{voucher_pdf_filename(code)}"


def fill_placeholders(source: str, values: dict) -> str:
    """
    Replace every ``{{token}}`` in ``source`` with ``values[token]``.

    One pass over the original source: substituted text is never scanned
    again, so a message containing ``{{code}}`` stays literal. Unknown
    tokens are left untouched. Values must already be HTML-safe.
    """
    def replace(match):
        return values.get(match.group(1), match.group(0))

    return PLACEHOLDER_PATTERN.sub(replace, source)


def build_placeholder_values(voucher, store, product) -> dict:
    """Escaped replacement text for every token a voucher template may use."""
    expiration = timezone.localtime(voucher.expiration_date)
    values = {
        'storeName': store.name,
        'storeAddress': store.address,
        'storePhone': store.phone,
        'storeEmail': store.email,
        'storeLogo': store.logo,
        'storeSocial': ', '.join(url for _, url in store.social_links()),
        'productName': product.name,
        'productDescription': product.description,
        'amount': f"{settings.VOUCHER_CURRENCY_SYMBOL}{voucher.amount:,.2f}",
        'code': voucher.code,
        'expirationDate': expiration.strftime(settings.VOUCHER_DATE_FORMAT),
        'sender_name': voucher.sender_name,
        'receiver_name': voucher.receiver_name,
        'message': voucher.message,
        'qrCode': voucher.qr_code,
    }
    return {key: escape(value or '') for key, value in values.items()}


def load_template_source(template_name: str) -> str:
    """Raw source of ``vouchers/voucher-{template_name}.html``."""
    template = get_template(f"vouchers/voucher-{template_name}.html")
    return template.template.source


def _fetch_url(url, timeout=None, ssl_context=None):
    from weasyprint import default_url_fetcher

    return default_url_fetcher(
        url,
        timeout=settings.VOUCHER_PDF_FETCH_TIMEOUT,
        ssl_context=ssl_context,
    )


def html_to_pdf(html: str) -> bytes:
    """Print ``html`` to an A4 PDF with WeasyPrint."""
    from weasyprint import CSS, HTML

    document = HTML(
        string=html,
        base_url=str(settings.BASE_DIR),
        url_fetcher=_fetch_url,
    )
    return document.write_pdf(stylesheets=[CSS(string=PAGE_STYLESHEET)])


def write_pdf_atomically(pdf_bytes: bytes, target: Path) -> None:
    """
    Write ``pdf_bytes`` to ``target`` through a temp file in the same directory.

    Readers never see a half-written PDF, and the temp file is removed
    whenever the write or the rename fails.
    """
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{target.stem}-", suffix='.tmp', dir=target.parent
    )
    try:
        with os.fdopen(fd, 'wb') as tmp:
            tmp.write(pdf_bytes)
        os.replace(tmp_name, target)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def _render(order_id) -> bytes:
    try:
        order = Order.objects.select_related('voucher').get(pk=order_id)
    except Order.DoesNotExist:
        raise OrderNotFoundError()

    voucher = order.voucher
    store = Store.objects.filter(pk=voucher.store_id).first()
    if store is None:
        raise StoreNotFoundError(f"Store {voucher.store_id} not found")
    product = Product.objects.filter(pk=voucher.product_id).first()
    if product is None:
        raise ProductNotFoundError(f"Product {voucher.product_id} not found")

    source = load_template_source(voucher.template)
    html = fill_placeholders(source, build_placeholder_values(voucher, store, product))

    pdf_bytes = html_to_pdf(html)
    if not pdf_bytes or not pdf_bytes.startswith(PDF_MAGIC):
        raise VoucherPdfError("Renderer output is not a PDF")

    target = voucher_pdf_path(voucher.code)
    write_pdf_atomically(pdf_bytes, target)

    Order.objects.filter(pk=order.pk).update(
        pdf_generated=True,
        pdf_url=voucher_pdf_url(voucher.code),
        updated_at=timezone.now(),
    )
    logger.info("Voucher PDF for order %s written to %s", order.pk, target)
    return pdf_bytes


def render_voucher_pdf(order_id) -> Optional[bytes]:
    """
    Render, store and record the voucher PDF of an order.

    Rendering again overwrites the same file. Failures never propagate:
    a missing order, store, product or template, a renderer crash or a
    write error is logged with the failing step and ``None`` is returned,
    which callers read as "do not send emails".

    Args:
        order_id: Primary key of the order

    Returns:
        The PDF bytes, or None if anything failed.
    """
    try:
        return _render(order_id)
    except OrderNotFoundError:
        logger.error("Cannot render voucher PDF: order %s not found", order_id)
    except StoreNotFoundError as e:
        logger.error("Cannot render voucher PDF for order %s: %s", order_id, e.detail)
    except ProductNotFoundError as e:
        logger.error("Cannot render voucher PDF for order %s: %s", order_id, e.detail)
    except TemplateDoesNotExist as e:
        logger.error("Cannot render voucher PDF for order %s: template %s missing", order_id, e)
    except Exception:
        logger.exception("Voucher PDF rendering failed for order %s", order_id)
    return None

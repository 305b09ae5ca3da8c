import os
from datetime import timedelta
from unittest.mock import patch

import pytest
from django.conf import settings
from django.core import mail
from django.core.mail import EmailMultiAlternatives
from django.utils import timezone

from apps.orders.models import Order
from apps.orders.services import (
    create_order,
    update_order,
    delete_order,
    get_order,
    render_voucher_pdf,
    send_all_voucher_emails,
    resend_receiver_email,
    get_voucher_pdf,
    OrderValidationError,
    OrderNotFoundError,
    VoucherPdfError,
)
from apps.orders.services.pdf_rendering import (
    fill_placeholders,
    voucher_pdf_path,
    write_pdf_atomically,
)
from apps.vouchers.models import Voucher, VoucherStatus
from apps.vouchers.services import VoucherCodeConflictError
from apps.vouchers.services.code_generation import CODE_ALPHABET
from .conftest import FAKE_PDF


def failing_for(*recipients):
    """Replacement for EmailMultiAlternatives.send that fails for some recipients."""
    def send(message, fail_silently=False):
        if set(message.to) & set(recipients):
            raise ConnectionError('SMTP server unavailable')
        return 1
    return send


@pytest.mark.django_db
class TestCreateOrder:

    def test_creates_order_with_active_voucher(self, order_payload, customer, store, product):
        order = create_order(data=order_payload())

        assert order.customer == customer
        assert order.amount == 50
        assert order.payment_status == 'completed'
        assert order.emails_sent is False
        assert order.pdf_generated is False

        voucher = order.voucher
        assert voucher.store == store
        assert voucher.product == product
        assert voucher.status == VoucherStatus.ACTIVE
        assert voucher.is_redeemed is False
        assert voucher.redeemed_at is None
        assert voucher.amount == order.amount
        assert voucher.qr_code.startswith('data:image/png;base64,')

    def test_generated_code_format(self, order_payload):
        order = create_order(data=order_payload())

        code = order.voucher.code
        assert len(code) == settings.VOUCHER_CODE_LENGTH
        assert set(code) <= set(CODE_ALPHABET)

    def test_generated_codes_are_unique(self, order_payload):
        codes = {create_order(data=order_payload()).voucher.code for _ in range(25)}
        assert len(codes) == 25

    def test_caller_supplied_code_is_kept(self, order_payload):
        order = create_order(data=order_payload(code='SPRING-2024'))
        assert order.voucher.code == 'SPRING-2024'

    def test_caller_supplied_duplicate_code_conflicts(self, order_payload):
        create_order(data=order_payload(code='SPRING-2024'))

        with pytest.raises(VoucherCodeConflictError):
            create_order(data=order_payload(code='SPRING-2024'))

        assert Order.objects.count() == 1

    def test_generated_code_is_redrawn_after_collision(self, order_payload):
        """A generated code taken by a concurrent insert is replaced once."""
        create_order(data=order_payload(code='TAKEN00001'))

        with patch(
            'apps.orders.services.order_management.generate_unique_code',
            side_effect=['TAKEN00001', 'FRESH00001'],
        ) as generate:
            order = create_order(data=order_payload())

        assert generate.call_count == 2
        assert order.voucher.code == 'FRESH00001'
        assert Order.objects.count() == 2

    def test_generated_code_collision_conflicts_after_retry(self, order_payload):
        create_order(data=order_payload(code='TAKEN00001'))

        with patch(
            'apps.orders.services.order_management.generate_unique_code',
            return_value='TAKEN00001',
        ):
            with pytest.raises(VoucherCodeConflictError):
                create_order(data=order_payload())

        assert Order.objects.count() == 1

    def test_reports_every_missing_field(self, order_payload):
        payload = order_payload()
        del payload['customer']
        del payload['payment_details']['amount']
        del payload['voucher']['receiver_email']

        with pytest.raises(OrderValidationError) as exc:
            create_order(data=payload)

        errors = exc.value.detail
        assert errors['customer'][0].code == 'required'
        assert errors['payment_details']['amount'][0].code == 'required'
        assert errors['voucher']['receiver_email'][0].code == 'required'
        assert Order.objects.count() == 0

    def test_reports_invalid_and_missing_fields_together(self, order_payload):
        payload = order_payload(receiver_email='not-an-email')
        del payload['voucher']['template']

        with pytest.raises(OrderValidationError) as exc:
            create_order(data=payload)

        voucher_errors = exc.value.detail['voucher']
        assert set(voucher_errors) == {'receiver_email', 'template'}

    def test_rejects_past_expiration(self, order_payload):
        payload = order_payload(expiration_date=(timezone.now() - timedelta(days=1)).isoformat())

        with pytest.raises(OrderValidationError) as exc:
            create_order(data=payload)

        assert 'expiration_date' in exc.value.detail['voucher']

    def test_rejects_product_of_other_store(self, order_payload, manager):
        from apps.products.models import Product
        from apps.stores.models import Store

        other_store = Store.objects.create(owner=manager, name='Other', email='other@store.example')
        foreign = Product.objects.create(store=other_store, name='Mug', price='9.00')

        with pytest.raises(OrderValidationError) as exc:
            create_order(data=order_payload(product=str(foreign.id)))

        assert 'product' in exc.value.detail['voucher']

    def test_rejects_inactive_store(self, order_payload, store):
        store.is_active = False
        store.save()

        with pytest.raises(OrderValidationError) as exc:
            create_order(data=order_payload())

        assert 'store' in exc.value.detail['voucher']

    def test_message_length_limit(self, order_payload):
        with pytest.raises(OrderValidationError) as exc:
            create_order(data=order_payload(message='x' * 501))

        assert 'message' in exc.value.detail['voucher']

    def test_fulfilment_runs_after_commit(self, order_payload, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            order = create_order(data=order_payload())

        assert len(callbacks) == 1
        order.refresh_from_db()
        assert order.pdf_generated is True
        assert order.pdf_url == f'vouchers/voucher-{order.voucher.code}.pdf'
        assert order.emails_sent is True
        assert voucher_pdf_path(order.voucher.code).read_bytes() == FAKE_PDF


@pytest.mark.django_db
class TestVoucherPdf:

    def test_placeholders_are_filled(self, created_order, fake_pdf_renderer):
        html = fake_pdf_renderer.call_args[0][0]
        voucher = created_order.voucher

        assert 'Bean There' in html
        assert 'Tasting Flight' in html
        assert '$50.00' in html
        assert voucher.code in html
        assert voucher.qr_code in html
        assert 'https://instagram.com/beanthere, https://blog.beanthere.example' in html
        assert timezone.localtime(voucher.expiration_date).strftime('%d/%m/%Y') in html
        assert '{{' not in html

    def test_values_are_escaped_and_not_rescanned(
        self, order_payload, fake_pdf_renderer, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            create_order(data=order_payload(message='<b>Use {{code}}</b>'))

        html = fake_pdf_renderer.call_args[0][0]
        assert '&lt;b&gt;Use {{code}}&lt;/b&gt;' in html
        assert '<b>Use' not in html

    def test_unknown_tokens_left_alone(self):
        result = fill_placeholders('{{storeName}} / {{mystery}}', {'storeName': 'Shop'})
        assert result == 'Shop / {{mystery}}'

    def test_rerender_overwrites_same_file(self, created_order):
        path = voucher_pdf_path(created_order.voucher.code)
        assert path.is_file()

        assert render_voucher_pdf(created_order.pk) == FAKE_PDF

        code = created_order.voucher.code
        assert [p for p in path.parent.iterdir() if code in p.name] == [path]

    def test_missing_template_returns_none(self, created_order):
        Voucher.objects.filter(order=created_order).update(template='missing')
        Order.objects.filter(pk=created_order.pk).update(pdf_generated=False)

        assert render_voucher_pdf(created_order.pk) is None

    def test_missing_order_returns_none(self, db):
        assert render_voucher_pdf('00000000-0000-0000-0000-000000000000') is None

    def test_renderer_crash_returns_none(self, order_payload, fake_pdf_renderer):
        order = create_order(data=order_payload())
        fake_pdf_renderer.side_effect = RuntimeError('renderer crashed')

        assert render_voucher_pdf(order.pk) is None
        order.refresh_from_db()
        assert order.pdf_generated is False

    def test_non_pdf_output_is_rejected(self, order_payload, fake_pdf_renderer):
        order = create_order(data=order_payload())
        fake_pdf_renderer.return_value = b'<html>not a pdf</html>'

        assert render_voucher_pdf(order.pk) is None
        assert not voucher_pdf_path(order.voucher.code).exists()

    def test_failed_write_leaves_no_temp_file(self, tmp_path):
        target = tmp_path / 'voucher-ABC.pdf'

        with patch('apps.orders.services.pdf_rendering.os.replace', side_effect=OSError('disk full')):
            with pytest.raises(OSError):
                write_pdf_atomically(FAKE_PDF, target)

        assert os.listdir(tmp_path) == []

    def test_download_renders_on_demand(self, order_payload):
        order = create_order(data=order_payload())

        path = get_voucher_pdf(order.pk)

        assert path.read_bytes() == FAKE_PDF
        order.refresh_from_db()
        assert order.pdf_generated is True

    def test_download_fails_when_rendering_fails(self, order_payload, fake_pdf_renderer):
        order = create_order(data=order_payload())
        fake_pdf_renderer.side_effect = RuntimeError('renderer crashed')

        with pytest.raises(VoucherPdfError):
            get_voucher_pdf(order.pk)


@pytest.mark.django_db
class TestVoucherEmails:

    def test_three_emails_with_pdf_attached(self, created_order):
        code = created_order.voucher.code

        assert len(mail.outbox) == 3
        by_recipient = {message.to[0]: message for message in mail.outbox}
        assert set(by_recipient) == {
            'shop@beanthere.example', 'bob@example.com', 'alice@example.com',
        }
        assert by_recipient['shop@beanthere.example'].subject == 'A new voucher has been purchased!'
        assert by_recipient['bob@example.com'].subject == (
            "You've received a gift voucher from Alice Sender!"
        )
        assert by_recipient['alice@example.com'].subject == (
            'Your gift voucher purchase confirmation'
        )
        for message in mail.outbox:
            filename, content, mimetype = message.attachments[0]
            assert filename == f'voucher-{code}.pdf'
            assert content == FAKE_PDF
            assert mimetype == 'application/pdf'

    def test_partial_failure_still_counts_as_sent(self, created_order):
        Order.objects.filter(pk=created_order.pk).update(emails_sent=False)
        path = voucher_pdf_path(created_order.voucher.code)

        with patch.object(
            EmailMultiAlternatives, 'send', autospec=True,
            side_effect=failing_for('bob@example.com', 'shop@beanthere.example'),
        ) as send:
            assert send_all_voucher_emails(created_order.pk, path) is True

        assert send.call_count == 3
        created_order.refresh_from_db()
        assert created_order.emails_sent is True

    def test_total_failure_leaves_flag_unset(self, created_order):
        Order.objects.filter(pk=created_order.pk).update(emails_sent=False)
        path = voucher_pdf_path(created_order.voucher.code)

        with patch.object(
            EmailMultiAlternatives, 'send', autospec=True,
            side_effect=failing_for('bob@example.com', 'shop@beanthere.example', 'alice@example.com'),
        ) as send:
            assert send_all_voucher_emails(created_order.pk, path) is False

        assert send.call_count == 3
        created_order.refresh_from_db()
        assert created_order.emails_sent is False

    def test_missing_pdf_sends_nothing(self, created_order, tmp_path):
        mail.outbox.clear()

        assert send_all_voucher_emails(created_order.pk, tmp_path / 'nope.pdf') is False
        assert mail.outbox == []

    def test_resend_single_recipient(self, created_order):
        mail.outbox.clear()

        assert resend_receiver_email(created_order.pk) is True

        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == ['bob@example.com']

    def test_resend_single_recipient_failure(self, created_order):
        with patch.object(
            EmailMultiAlternatives, 'send', autospec=True,
            side_effect=failing_for('bob@example.com'),
        ):
            assert resend_receiver_email(created_order.pk) is False

    def test_resend_unknown_order(self, db):
        with pytest.raises(OrderNotFoundError):
            resend_receiver_email('00000000-0000-0000-0000-000000000000')


@pytest.mark.django_db
class TestUpdateAndDelete:

    def test_voucher_text_change_invalidates_pdf(self, created_order):
        order = update_order(
            order_id=created_order.pk,
            data={'voucher': {'message': 'New message'}},
        )

        assert order.voucher.message == 'New message'
        assert order.pdf_generated is False

    def test_payment_status_change_keeps_pdf(self, created_order):
        order = update_order(order_id=created_order.pk, data={'payment_status': 'failed'})

        assert order.payment_status == 'failed'
        assert order.pdf_generated is True

    def test_redemption_state_cannot_be_updated(self, created_order):
        with pytest.raises(OrderValidationError):
            update_order(order_id=created_order.pk, data={'voucher': {'status': 'redeemed'}})

        assert get_order(created_order.pk).voucher.status == VoucherStatus.ACTIVE

    def test_update_unknown_order(self, db):
        with pytest.raises(OrderNotFoundError):
            update_order(order_id='not-a-uuid', data={'payment_status': 'failed'})

    def test_delete_removes_voucher_and_pdf(self, created_order):
        path = voucher_pdf_path(created_order.voucher.code)
        assert path.is_file()

        delete_order(order_id=created_order.pk)

        assert not Order.objects.filter(pk=created_order.pk).exists()
        assert not Voucher.objects.filter(code=created_order.voucher.code).exists()
        assert not path.exists()

import pytest
from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole
from apps.customers.models import Customer
from apps.products.models import Product
from apps.stores.models import Store

FAKE_PDF = b'%PDF-1.7 fake voucher'


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture(autouse=True)
def fake_pdf_renderer():
    """Stand in for WeasyPrint; records the HTML it was asked to print."""
    with patch(
        'apps.orders.services.pdf_rendering.html_to_pdf',
        return_value=FAKE_PDF,
    ) as renderer:
        yield renderer


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def manager(db):
    return User.objects.create_user(
        email='manager@example.com',
        password='TestPass123!',
        role=UserRole.STORE_MANAGER,
    )


@pytest.fixture
def other_manager(db):
    """A store manager who does not own the order's store."""
    return User.objects.create_user(
        email='other-manager@example.com',
        password='TestPass123!',
        role=UserRole.STORE_MANAGER,
    )


@pytest.fixture
def shop_admin(db):
    return User.objects.create_superuser(
        email='admin@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def shopper(db):
    return User.objects.create_user(
        email='shopper@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def manager_client(manager):
    return _client_for(manager)


@pytest.fixture
def other_manager_client(other_manager):
    return _client_for(other_manager)


@pytest.fixture
def shop_admin_client(shop_admin):
    return _client_for(shop_admin)


@pytest.fixture
def shopper_client(shopper):
    return _client_for(shopper)


@pytest.fixture
def store(manager):
    return Store.objects.create(
        owner=manager,
        name='Bean There',
        email='shop@beanthere.example',
        phone='+1 555 0100',
        address='1 Main Street',
        logo='https://cdn.example/logo.png',
        social={
            'instagram': 'https://instagram.com/beanthere',
            'facebook': '',
            'others': [{'name': 'blog', 'url': 'https://blog.beanthere.example'}],
        },
    )


@pytest.fixture
def product(store):
    return Product.objects.create(
        store=store,
        name='Tasting Flight',
        description='Five single origins, one afternoon.',
        price=Decimal('25.00'),
    )


@pytest.fixture
def customer(db):
    return Customer.objects.create(
        full_name='Alice Sender',
        email='alice@example.com',
        phone_number='+1 555 0111',
        address='3 Side Street',
        city='Springfield',
        zip_code='12345',
        country='US',
    )


@pytest.fixture
def order_payload(store, product, customer):
    """Build a valid create-order payload; keyword overrides go into ``voucher``."""
    def build(**voucher_overrides):
        voucher = {
            'store': str(store.id),
            'product': str(product.id),
            'expiration_date': (timezone.now() + timedelta(days=90)).isoformat(),
            'sender_name': 'Alice Sender',
            'sender_email': 'alice@example.com',
            'receiver_name': 'Bob Receiver',
            'receiver_email': 'bob@example.com',
            'message': 'Happy birthday, enjoy the coffee!',
            'template': 'birthday',
        }
        voucher.update(voucher_overrides)
        return {
            'customer': str(customer.id),
            'payment_details': {
                'payment_id': 'pi_123456',
                'payment_status': 'completed',
                'payment_email': 'alice@example.com',
                'amount': '50.00',
                'provider': 'stripe',
            },
            'voucher': voucher,
        }
    return build


@pytest.fixture
def created_order(order_payload, django_capture_on_commit_callbacks):
    """An order created through the service, with fulfilment already run."""
    from apps.orders.services import create_order

    with django_capture_on_commit_callbacks(execute=True):
        order = create_order(data=order_payload())
    order.refresh_from_db()
    return order

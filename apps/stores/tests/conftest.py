import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole
from apps.stores.models import Store


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def manager(db):
    return User.objects.create_user(
        email='manager@example.com',
        password='TestPass123!',
        display_name='Store Manager',
        role=UserRole.STORE_MANAGER,
    )


@pytest.fixture
def other_manager(db):
    return User.objects.create_user(
        email='othermanager@example.com',
        password='TestPass123!',
        role=UserRole.STORE_MANAGER,
    )


@pytest.fixture
def customer_user(db):
    return User.objects.create_user(
        email='customer@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def manager_client(manager):
    return _client_for(manager)


@pytest.fixture
def other_manager_client(other_manager):
    return _client_for(other_manager)


@pytest.fixture
def customer_client(customer_user):
    return _client_for(customer_user)


@pytest.fixture
def store(manager):
    return Store.objects.create(
        owner=manager,
        name='Bean There',
        email='shop@beanthere.example',
        phone='+1 555 0100',
        address='1 Main Street',
        social={'instagram': 'https://instagram.com/beanthere', 'others': []},
    )

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole
from apps.customers.models import Customer


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
def authenticated_client(manager):
    client = APIClient()
    refresh = RefreshToken.for_user(manager)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


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

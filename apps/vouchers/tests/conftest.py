import pytest
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone
from apps.accounts.models import User, UserRole
from apps.customers.models import Customer
from apps.orders.models import Order
from apps.products.models import Product
from apps.stores.models import Store
from apps.vouchers.models import Voucher


def create_voucher_order(store, product, customer, *, code, expires_in=timedelta(days=30), **voucher_fields):
    """Order plus voucher written straight to the DB, bypassing the order pipeline."""
    order = Order.objects.create(
        customer=customer,
        payment_id=f'pay_{code}',
        payment_email=customer.email,
        amount=Decimal('50.00'),
        provider='stripe',
    )
    Voucher.objects.create(
        order=order,
        store=store,
        product=product,
        code=code,
        expiration_date=timezone.now() + expires_in,
        amount=Decimal('50.00'),
        sender_name='Alice Sender',
        sender_email='alice@example.com',
        receiver_name='Bob Receiver',
        receiver_email='bob@example.com',
        message='Happy birthday!',
        template='birthday',
        **voucher_fields,
    )
    return order


@pytest.fixture
def manager(db):
    return User.objects.create_user(
        email='manager@example.com',
        password='TestPass123!',
        role=UserRole.STORE_MANAGER,
    )


@pytest.fixture
def store(manager):
    return Store.objects.create(
        owner=manager,
        name='Bean There',
        email='shop@beanthere.example',
        phone='+1 555 0100',
        address='1 Main Street',
    )


@pytest.fixture
def product(store):
    return Product.objects.create(store=store, name='Tasting Flight', price=Decimal('25.00'))


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
def voucher_order(store, product, customer):
    """An order with an active voucher valid for 30 days."""
    return create_voucher_order(store, product, customer, code='ACTIVE0001')


@pytest.fixture
def expired_voucher_order(store, product, customer):
    """An order whose voucher is still active but past its expiration date."""
    return create_voucher_order(
        store, product, customer, code='OVERDUE001', expires_in=-timedelta(days=1)
    )

"""
Serializers for the orders app.

Input serializers validate request bodies and query parameters before they
reach the services; output serializers shape responses.
"""
from decimal import Decimal

from django.utils import timezone
from rest_framework import serializers

from apps.customers.models import Customer
from apps.products.models import Product
from apps.stores.models import Store
from apps.vouchers.models import Voucher, VoucherStatus, VoucherTemplate
from .models import Order, PaymentProvider, PaymentStatus


# =============================================================================
# Input serializers
# =============================================================================

class PaymentDetailsInputSerializer(serializers.Serializer):
    """Snapshot of a payment the provider already processed."""

    payment_id = serializers.CharField(max_length=255)
    payment_status = serializers.ChoiceField(
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    payment_email = serializers.EmailField(max_length=255)
    amount = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal('0.01'),
    )
    provider = serializers.ChoiceField(choices=PaymentProvider.choices)


class VoucherInputSerializer(serializers.Serializer):
    store = serializers.PrimaryKeyRelatedField(queryset=Store.objects.all())
    product = serializers.PrimaryKeyRelatedField(queryset=Product.objects.all())
    code = serializers.RegexField(
        r'^[A-Za-z0-9-]+$',
        max_length=32,
        required=False,
        error_messages={'invalid': 'Code may only contain letters, digits and hyphens.'},
    )
    expiration_date = serializers.DateTimeField()
    sender_name = serializers.CharField(max_length=100)
    sender_email = serializers.EmailField(max_length=255)
    receiver_name = serializers.CharField(max_length=100)
    receiver_email = serializers.EmailField(max_length=255)
    message = serializers.CharField(max_length=500)
    template = serializers.ChoiceField(choices=VoucherTemplate.choices)

    def validate_expiration_date(self, value):
        if value <= timezone.now():
            raise serializers.ValidationError('Expiration date must be in the future.')
        return value

    def validate(self, attrs):
        errors = {}
        if not attrs['store'].is_active:
            errors['store'] = 'Store is not active.'
        if attrs['product'].store_id != attrs['store'].id:
            errors['product'] = 'Product does not belong to the selected store.'
        elif not attrs['product'].is_active:
            errors['product'] = 'Product is not available.'
        if errors:
            raise serializers.ValidationError(errors)
        return attrs


class OrderCreateInputSerializer(serializers.Serializer):
    """
    Validate a new order.

    Every field of the payload is checked, including both nested objects,
    so ``errors`` lists all violations at once.
    """

    customer = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.all())
    payment_details = PaymentDetailsInputSerializer()
    voucher = VoucherInputSerializer()


class VoucherUpdateInputSerializer(serializers.Serializer):
    sender_name = serializers.CharField(max_length=100, required=False)
    receiver_name = serializers.CharField(max_length=100, required=False)
    message = serializers.CharField(max_length=500, required=False)
    template = serializers.ChoiceField(choices=VoucherTemplate.choices, required=False)


class OrderUpdateInputSerializer(serializers.Serializer):
    """
    Fields an order update may touch.

    Redemption state is deliberately absent: it only changes through
    the redeem endpoint.
    """

    payment_status = serializers.ChoiceField(choices=PaymentStatus.choices, required=False)
    voucher = VoucherUpdateInputSerializer(required=False)

    def validate(self, attrs):
        if not attrs or (set(attrs) == {'voucher'} and not attrs['voucher']):
            raise serializers.ValidationError('Provide at least one field to update.')
        return attrs


class OrderListQuerySerializer(serializers.Serializer):
    """Query parameters for GET /api/orders/."""

    customer = serializers.UUIDField(required=False)
    store = serializers.UUIDField(required=False)
    status = serializers.ChoiceField(choices=VoucherStatus.choices, required=False)
    sender_email = serializers.EmailField(required=False)
    receiver_email = serializers.EmailField(required=False)


# =============================================================================
# Output serializers
# =============================================================================

class VoucherSerializer(serializers.ModelSerializer):
    store_name = serializers.CharField(source='store.name', read_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True)

    class Meta:
        model = Voucher
        fields = [
            'id',
            'code',
            'status',
            'is_redeemed',
            'redeemed_at',
            'expiration_date',
            'amount',
            'store',
            'store_name',
            'product',
            'product_name',
            'sender_name',
            'sender_email',
            'receiver_name',
            'receiver_email',
            'message',
            'template',
            'qr_code',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class PaymentDetailsSerializer(serializers.ModelSerializer):

    class Meta:
        model = Order
        fields = ['payment_id', 'payment_status', 'payment_email', 'amount', 'provider']
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Order with its payment snapshot and voucher nested."""

    payment_details = PaymentDetailsSerializer(source='*', read_only=True)
    voucher = VoucherSerializer(read_only=True)

    class Meta:
        model = Order
        fields = [
            'id',
            'customer',
            'payment_details',
            'voucher',
            'emails_sent',
            'pdf_generated',
            'pdf_url',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

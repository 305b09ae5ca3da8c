from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class VoucherStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    REDEEMED = 'redeemed', 'Redeemed'
    EXPIRED = 'expired', 'Expired'


class VoucherTemplate(models.TextChoices):
    TEMPLATE1 = 'template1', 'Template 1'
    TEMPLATE2 = 'template2', 'Template 2'
    TEMPLATE3 = 'template3', 'Template 3'
    TEMPLATE4 = 'template4', 'Template 4'
    TEMPLATE5 = 'template5', 'Template 5'
    BIRTHDAY = 'birthday', 'Birthday'
    CHRISTMAS = 'christmas', 'Christmas'
    VALENTINE = 'valentine', 'Valentine'
    GENERAL = 'general', 'General'


class Voucher(models.Model):
    """
    Gift voucher issued with an order.

    Lifecycle: active -> redeemed, or active -> expired. Both are terminal.
    is_redeemed, status == redeemed and redeemed_at always move together;
    only apps.vouchers.services.redemption changes them.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.OneToOneField(
        'orders.Order',
        on_delete=models.CASCADE,
        related_name='voucher',
    )
    store = models.ForeignKey(
        'stores.Store',
        on_delete=models.PROTECT,
        related_name='vouchers',
    )
    product = models.ForeignKey(
        'products.Product',
        on_delete=models.PROTECT,
        related_name='vouchers',
    )

    code = models.CharField(max_length=32, unique=True)
    status = models.CharField(
        max_length=20,
        choices=VoucherStatus.choices,
        default=VoucherStatus.ACTIVE,
    )
    is_redeemed = models.BooleanField(default=False)
    redeemed_at = models.DateTimeField(null=True, blank=True)
    expiration_date = models.DateTimeField()

    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
    )
    sender_name = models.CharField(max_length=100)
    sender_email = models.EmailField(max_length=255)
    receiver_name = models.CharField(max_length=100)
    receiver_email = models.EmailField(max_length=255)
    message = models.TextField(max_length=500)
    template = models.CharField(
        max_length=20,
        choices=VoucherTemplate.choices,
        default=VoucherTemplate.TEMPLATE1,
    )
    qr_code = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'vouchers'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'expiration_date'], name='vouchers_status_exp_idx'),
            models.Index(fields=['store', 'status'], name='vouchers_store_status_idx'),
        ]

    def __str__(self):
        return f"{self.code} ({self.get_status_display()})"

    @property
    def is_active(self):
        return self.status == VoucherStatus.ACTIVE

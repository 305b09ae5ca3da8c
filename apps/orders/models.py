from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class PaymentStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    COMPLETED = 'completed', 'Completed'
    FAILED = 'failed', 'Failed'


class PaymentProvider(models.TextChoices):
    MERCADOPAGO = 'mercadopago', 'Mercado Pago'
    PAYPAL = 'paypal', 'PayPal'
    STRIPE = 'stripe', 'Stripe'


class Order(models.Model):
    """
    A voucher purchase.

    Holds a snapshot of the already-processed payment, the delivery flags
    for the voucher PDF and emails, and (through ``order.voucher``) the
    voucher itself.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer = models.ForeignKey(
        'customers.Customer',
        on_delete=models.PROTECT,
        related_name='orders',
    )

    # Payment snapshot
    payment_id = models.CharField(max_length=255)
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    payment_email = models.EmailField(max_length=255)
    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
    )
    provider = models.CharField(max_length=20, choices=PaymentProvider.choices)

    # Delivery
    emails_sent = models.BooleanField(default=False)
    pdf_generated = models.BooleanField(default=False)
    pdf_url = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['customer', '-created_at'], name='orders_customer_created_idx'),
            models.Index(fields=['payment_status'], name='orders_payment_status_idx'),
        ]

    def __str__(self):
        return f"Order {self.id} ({self.amount} via {self.provider})"

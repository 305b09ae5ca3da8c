from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class Product(models.Model):
    """Something a store sells a gift voucher for."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    store = models.ForeignKey(
        'stores.Store',
        on_delete=models.CASCADE,
        related_name='products',
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
    )
    is_active = models.BooleanField(default=True, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'products'
        ordering = ['store', 'name']
        indexes = [
            models.Index(fields=['store', 'is_active'], name='products_store_active_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.store.name})"

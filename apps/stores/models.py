from django.conf import settings
from django.db import models
import uuid


def default_social():
    return {
        'instagram': '',
        'facebook': '',
        'tiktok': '',
        'youtube': '',
        'others': [],
    }


class Store(models.Model):
    """A shop selling gift vouchers for its products."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='stores',
    )
    name = models.CharField(max_length=200, db_index=True)
    email = models.EmailField(unique=True, max_length=255)
    phone = models.CharField(max_length=50)
    address = models.CharField(max_length=300)
    logo = models.URLField(max_length=500, blank=True)
    social = models.JSONField(default=default_social, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'stores'
        ordering = ['name']
        indexes = [
            models.Index(fields=['owner', 'is_active'], name='stores_owner_active_idx'),
        ]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    def social_links(self):
        """Non-empty social links as (network, url) pairs, extras last."""
        social = self.social or {}
        links = [
            (network, social.get(network))
            for network in ('instagram', 'facebook', 'tiktok', 'youtube')
            if social.get(network)
        ]
        for extra in social.get('others') or []:
            if isinstance(extra, dict) and extra.get('url'):
                links.append((extra.get('name') or 'link', extra['url']))
        return links

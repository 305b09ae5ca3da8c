from rest_framework import serializers
from .models import Store, default_social


class StoreSocialSerializer(serializers.Serializer):
    instagram = serializers.URLField(required=False, allow_blank=True)
    facebook = serializers.URLField(required=False, allow_blank=True)
    tiktok = serializers.URLField(required=False, allow_blank=True)
    youtube = serializers.URLField(required=False, allow_blank=True)
    others = serializers.ListField(
        child=serializers.DictField(child=serializers.CharField()),
        required=False,
    )


class StoreSerializer(serializers.ModelSerializer):
    """Store details; the owner is always the requesting user."""

    social = serializers.JSONField(required=False)
    owner_email = serializers.EmailField(source='owner.email', read_only=True)

    class Meta:
        model = Store
        fields = [
            'id',
            'name',
            'email',
            'phone',
            'address',
            'logo',
            'social',
            'is_active',
            'owner',
            'owner_email',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'owner', 'created_at', 'updated_at']

    def validate_email(self, value):
        value = value.strip().lower()
        qs = Store.objects.filter(email=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError('A store with this email already exists.')
        return value

    def validate_social(self, value):
        social = StoreSocialSerializer(data=value or {})
        social.is_valid(raise_exception=True)
        return {**default_social(), **social.validated_data}

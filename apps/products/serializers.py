from rest_framework import serializers
from .models import Product


class ProductSerializer(serializers.ModelSerializer):
    store_name = serializers.CharField(source='store.name', read_only=True)

    class Meta:
        model = Product
        fields = [
            'id',
            'store',
            'store_name',
            'name',
            'description',
            'price',
            'is_active',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_store(self, store):
        """Products can only be added to stores the requesting user runs."""
        request = self.context.get('request')
        user = getattr(request, 'user', None)
        if user is not None and not user.is_admin and store.owner_id != user.id:
            raise serializers.ValidationError('You can only manage products of your own stores.')
        if not store.is_active:
            raise serializers.ValidationError('Store is not active.')
        return store

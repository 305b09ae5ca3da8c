from rest_framework import serializers
from .models import Customer


class CustomerSerializer(serializers.ModelSerializer):

    class Meta:
        model = Customer
        fields = [
            'id',
            'user',
            'full_name',
            'email',
            'phone_number',
            'address',
            'city',
            'zip_code',
            'country',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']
        extra_kwargs = {
            'full_name': {'min_length': 3},
            'phone_number': {'min_length': 7},
            'address': {'min_length': 5},
            'city': {'min_length': 2},
            'zip_code': {'min_length': 3},
            'country': {'min_length': 2},
            # Case-insensitive uniqueness is checked in validate_email
            'email': {'validators': []},
        }

    def validate_email(self, value):
        value = value.strip().lower()
        qs = Customer.objects.filter(email=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError('A customer with this email already exists.')
        return value

from django.contrib import admin
from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'email', 'phone_number', 'city', 'country', 'created_at']
    list_filter = ['country', 'created_at']
    search_fields = ['full_name', 'email', 'phone_number']
    readonly_fields = ['id', 'created_at', 'updated_at']
    raw_id_fields = ['user']

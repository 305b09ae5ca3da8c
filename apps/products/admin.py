from django.contrib import admin
from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'store', 'price', 'is_active', 'created_at']
    list_filter = ['is_active', 'store']
    search_fields = ['name', 'description', 'store__name']
    readonly_fields = ['id', 'created_at', 'updated_at']
    list_select_related = ['store']

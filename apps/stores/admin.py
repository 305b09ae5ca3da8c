from django.contrib import admin
from .models import Store


@admin.register(Store)
class StoreAdmin(admin.ModelAdmin):
    list_display = ['name', 'email', 'phone', 'owner', 'is_active', 'created_at']
    list_filter = ['is_active', 'created_at']
    search_fields = ['name', 'email', 'owner__email']
    readonly_fields = ['id', 'created_at', 'updated_at']
    raw_id_fields = ['owner']

    actions = ['activate_stores', 'deactivate_stores']

    @admin.action(description='Activate selected stores')
    def activate_stores(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f'Activated {count} store(s).')

    @admin.action(description='Deactivate selected stores')
    def deactivate_stores(self, request, queryset):
        count = queryset.update(is_active=False)
        self.message_user(request, f'Deactivated {count} store(s).')

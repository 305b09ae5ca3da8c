from django.contrib import admin
from django.utils.html import format_html
from .models import Voucher, VoucherStatus
from .services import expire_overdue_vouchers


STATUS_COLOURS = {
    VoucherStatus.ACTIVE: '#6B8E5E',
    VoucherStatus.REDEEMED: '#A47449',
    VoucherStatus.EXPIRED: '#B85C5C',
}


@admin.register(Voucher)
class VoucherAdmin(admin.ModelAdmin):
    list_display = [
        'code',
        'store',
        'product',
        'amount',
        'status_badge',
        'expiration_date',
        'redeemed_at',
        'created_at',
    ]
    list_filter = ['status', 'template', 'store', 'created_at']
    search_fields = ['code', 'receiver_email', 'sender_email', 'receiver_name', 'sender_name']
    date_hierarchy = 'created_at'
    list_select_related = ['store', 'product']
    raw_id_fields = ['order', 'store', 'product']

    # Redemption state only changes through the redemption service
    readonly_fields = [
        'id',
        'code',
        'status',
        'is_redeemed',
        'redeemed_at',
        'qr_preview',
        'created_at',
        'updated_at',
    ]
    exclude = ['qr_code']

    def status_badge(self, obj):
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            STATUS_COLOURS.get(obj.status, '#ccc'),
            obj.get_status_display(),
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    def qr_preview(self, obj):
        if not obj.qr_code:
            return '-'
        return format_html('<img src="{}" width="120" height="120" />', obj.qr_code)
    qr_preview.short_description = 'QR code'

    actions = ['expire_overdue']

    @admin.action(description='Expire all overdue active vouchers')
    def expire_overdue(self, request, queryset):
        count = expire_overdue_vouchers()
        self.message_user(request, f'Expired {count} voucher(s).')

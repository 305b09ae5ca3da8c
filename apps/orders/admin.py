from django.contrib import admin
from django.utils.html import format_html
from apps.vouchers.models import Voucher
from .models import Order
from .services import resend_voucher_emails, render_voucher_pdf


class VoucherInline(admin.StackedInline):
    model = Voucher
    extra = 0
    can_delete = False
    fk_name = 'order'
    exclude = ['qr_code']
    readonly_fields = ['code', 'status', 'is_redeemed', 'redeemed_at', 'created_at']
    raw_id_fields = ['store', 'product']


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = [
        'id',
        'customer',
        'voucher_code',
        'amount',
        'provider',
        'payment_status',
        'delivery_badge',
        'created_at',
    ]
    list_filter = ['payment_status', 'provider', 'emails_sent', 'pdf_generated', 'created_at']
    search_fields = ['id', 'payment_id', 'payment_email', 'customer__email', 'voucher__code']
    date_hierarchy = 'created_at'
    list_select_related = ['customer', 'voucher']
    raw_id_fields = ['customer']
    readonly_fields = ['id', 'emails_sent', 'pdf_generated', 'pdf_url', 'created_at', 'updated_at']
    inlines = [VoucherInline]

    def voucher_code(self, obj):
        voucher = getattr(obj, 'voucher', None)
        return voucher.code if voucher else '-'
    voucher_code.short_description = 'Voucher'
    voucher_code.admin_order_field = 'voucher__code'

    def delivery_badge(self, obj):
        """PDF / email delivery state."""
        if obj.emails_sent:
            colour, label = '#6B8E5E', 'Delivered'
        elif obj.pdf_generated:
            colour, label = '#E5C49A', 'PDF only'
        else:
            colour, label = '#B85C5C', 'Pending'
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            colour,
            label,
        )
    delivery_badge.short_description = 'Delivery'

    actions = ['regenerate_pdfs', 'resend_emails']

    @admin.action(description='Regenerate voucher PDFs')
    def regenerate_pdfs(self, request, queryset):
        ok = sum(1 for order in queryset if render_voucher_pdf(order.pk) is not None)
        self.message_user(request, f'Regenerated {ok} of {queryset.count()} PDF(s).')

    @admin.action(description='Resend voucher emails')
    def resend_emails(self, request, queryset):
        ok = sum(1 for order in queryset if resend_voucher_emails(order.pk))
        self.message_user(request, f'Resent emails for {ok} of {queryset.count()} order(s).')

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'orders'

router = DefaultRouter()
router.register(r'', views.OrderViewSet, basename='order')

urlpatterns = [
    # GET    /api/orders/                              - List orders
    # POST   /api/orders/                              - Create order
    # GET    /api/orders/{id}/                         - Get order
    # PUT    /api/orders/{id}/                         - Update order
    # PATCH  /api/orders/{id}/                         - Update order
    # DELETE /api/orders/{id}/                         - Delete order (admin)

    # Lookups
    # GET    /api/orders/customer/{customer_id}/       - Orders of a customer
    # GET    /api/orders/voucher/{code}/               - Order by voucher code
    # PUT    /api/orders/voucher/{code}/redeem/        - Redeem voucher

    # Delivery
    # POST   /api/orders/{id}/resend-emails/           - Resend all three emails
    # POST   /api/orders/{id}/resend-customer-email/   - Resend to sender
    # POST   /api/orders/{id}/resend-receiver-email/   - Resend to receiver
    # POST   /api/orders/{id}/resend-store-email/      - Resend to store
    # GET    /api/orders/{id}/download-pdf/            - Download voucher PDF
    path('', include(router.urls)),
]

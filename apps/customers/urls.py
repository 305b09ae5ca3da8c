from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'customers'

router = DefaultRouter()
router.register(r'', views.CustomerViewSet, basename='customer')

urlpatterns = [
    # GET    /api/customers/              - List customers (?search=)
    # POST   /api/customers/              - Create customer
    # GET    /api/customers/{id}/         - Get customer
    # PUT    /api/customers/{id}/         - Update customer
    # DELETE /api/customers/{id}/         - Delete customer
    # GET    /api/customers/{id}/orders/  - Customer's orders
    path('', include(router.urls)),
]

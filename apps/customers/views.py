from django.db.models import ProtectedError, Q
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema
from apps.orders.serializers import OrderSerializer
from apps.orders.services import list_orders
from .exceptions import CustomerHasOrdersError
from .models import Customer
from .serializers import CustomerSerializer


class CustomerPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


@extend_schema(tags=['customers'])
class CustomerViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Customer CRUD operations.

    orders: GET /api/customers/{id}/orders/ lists the customer's orders
    """

    queryset = Customer.objects.select_related('user')
    serializer_class = CustomerSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = CustomerPagination

    def get_queryset(self):
        queryset = super().get_queryset()
        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(
                Q(full_name__icontains=search) | Q(email__icontains=search)
            )
        return queryset

    def destroy(self, request, *args, **kwargs):
        try:
            return super().destroy(request, *args, **kwargs)
        except ProtectedError:
            raise CustomerHasOrdersError()

    @extend_schema(responses={200: OrderSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def orders(self, request, pk=None):
        """All orders placed by this customer, newest first."""
        customer = self.get_object()
        orders = list_orders(customer_id=customer.id)

        page = self.paginate_queryset(orders)
        if page is not None:
            return self.get_paginated_response(OrderSerializer(page, many=True).data)
        return Response(OrderSerializer(orders, many=True).data)

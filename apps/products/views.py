import uuid

from rest_framework import viewsets
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter
from apps.stores.permissions import IsStoreManagerOrReadOnly, IsStoreOwnerOrReadOnly
from .models import Product
from .serializers import ProductSerializer


class ProductPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


@extend_schema(
    tags=['products'],
    parameters=[
        OpenApiParameter('store', str, description='Only products of this store'),
    ],
)
class ProductViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Product CRUD operations.

    Reads are public and can be filtered by ?store=<id>.
    Writes need the owning store's manager (or an admin).
    """

    serializer_class = ProductSerializer
    permission_classes = [IsStoreManagerOrReadOnly, IsStoreOwnerOrReadOnly]
    pagination_class = ProductPagination

    def get_queryset(self):
        queryset = Product.objects.select_related('store')
        if self.action in ('list', 'retrieve'):
            queryset = queryset.filter(is_active=True, store__is_active=True)

        store_id = self.request.query_params.get('store')
        if store_id:
            try:
                queryset = queryset.filter(store_id=uuid.UUID(store_id))
            except ValueError:
                return queryset.none()
        return queryset

    def perform_destroy(self, instance):
        # Existing vouchers still reference the product
        instance.is_active = False
        instance.save(update_fields=['is_active', 'updated_at'])

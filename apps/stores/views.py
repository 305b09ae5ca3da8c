from rest_framework import viewsets
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema
from .models import Store
from .permissions import IsStoreManagerOrReadOnly, IsStoreOwnerOrReadOnly
from .serializers import StoreSerializer


class StorePagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


@extend_schema(tags=['stores'])
class StoreViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Store CRUD operations.

    list/retrieve: public
    create: store managers and admins (owner = request user)
    update/destroy: store owner or admin; destroy deactivates the store
    """

    serializer_class = StoreSerializer
    permission_classes = [IsStoreManagerOrReadOnly, IsStoreOwnerOrReadOnly]
    pagination_class = StorePagination

    def get_queryset(self):
        queryset = Store.objects.select_related('owner')
        if self.action in ('list', 'retrieve'):
            queryset = queryset.filter(is_active=True)

        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(name__icontains=search)
        return queryset

    def perform_create(self, serializer):
        serializer.save(owner=self.request.user)

    def perform_destroy(self, instance):
        # Orders keep pointing at the store, so it is only deactivated
        instance.is_active = False
        instance.save(update_fields=['is_active', 'updated_at'])

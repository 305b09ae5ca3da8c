from django.http import FileResponse
from rest_framework import viewsets, status, serializers as drf_serializers
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from .serializers import (
    OrderSerializer,
    # Input serializers
    OrderCreateInputSerializer,
    OrderUpdateInputSerializer,
    OrderListQuerySerializer,
)
from .services import (
    create_order,
    get_order,
    list_orders,
    get_order_by_voucher_code,
    update_order,
    delete_order,
    redeem_voucher,
    resend_voucher_emails as resend_all_emails_service,
    resend_customer_email as resend_customer_email_service,
    resend_receiver_email as resend_receiver_email_service,
    resend_store_email as resend_store_email_service,
    get_voucher_pdf,
    VoucherPdfError,
)
from .services.pdf_rendering import voucher_pdf_filename
from .permissions import IsShopAdmin, IsVoucherStoreStaff


# Response serializers for API documentation
class OrderResponseSerializer(drf_serializers.Serializer):
    success = drf_serializers.BooleanField()
    data = OrderSerializer()
    message = drf_serializers.CharField(required=False)


class OrderListResponseSerializer(drf_serializers.Serializer):
    success = drf_serializers.BooleanField()
    count = drf_serializers.IntegerField()
    next = drf_serializers.URLField(allow_null=True)
    previous = drf_serializers.URLField(allow_null=True)
    data = OrderSerializer(many=True)


class MessageResponseSerializer(drf_serializers.Serializer):
    success = drf_serializers.BooleanField()
    message = drf_serializers.CharField()


class OrderPagination(PageNumberPagination):
    """Custom pagination for orders."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


def _envelope(data=None, message=None, status_code=status.HTTP_200_OK, success=True):
    body = {'success': success}
    if data is not None:
        body['data'] = data
    if message:
        body['message'] = message
    return Response(body, status=status_code)


@extend_schema(tags=['orders'])
class OrderViewSet(viewsets.GenericViewSet):
    """
    Voucher orders.

    list: Orders, newest first (?customer=, ?store=, ?status=)
    create: Place an order; PDF and emails follow in the background
    retrieve / update / partial_update: One order
    destroy: Delete an order (admins only)

    Voucher actions:
    - GET  /api/orders/voucher/{code}/         - Look up by voucher code
    - PUT  /api/orders/voucher/{code}/redeem/  - Redeem (store staff)

    Delivery actions:
    - POST /api/orders/{id}/resend-emails/ (and per recipient)
    - GET  /api/orders/{id}/download-pdf/
    """

    serializer_class = OrderSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = OrderPagination

    def get_permissions(self):
        if self.action == 'destroy':
            return [IsAuthenticated(), IsShopAdmin()]
        if self.action == 'redeem':
            return [IsAuthenticated(), IsVoucherStoreStaff()]
        return super().get_permissions()

    def get_queryset(self):
        return list_orders()

    def _paginated(self, queryset):
        page = self.paginate_queryset(queryset)
        return Response({
            'success': True,
            'count': self.paginator.page.paginator.count,
            'next': self.paginator.get_next_link(),
            'previous': self.paginator.get_previous_link(),
            'data': OrderSerializer(page, many=True).data,
        })

    @extend_schema(
        parameters=[OrderListQuerySerializer],
        responses={200: OrderListResponseSerializer},
    )
    def list(self, request):
        """List orders using validated query parameters."""
        filter_serializer = OrderListQuerySerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        filters = filter_serializer.validated_data

        queryset = list_orders(
            customer_id=filters.get('customer'),
            store_id=filters.get('store'),
            status=filters.get('status'),
            sender_email=filters.get('sender_email'),
            receiver_email=filters.get('receiver_email'),
        )
        return self._paginated(queryset)

    @extend_schema(request=OrderCreateInputSerializer, responses={201: OrderResponseSerializer})
    def create(self, request):
        order = create_order(data=request.data)
        return _envelope(
            OrderSerializer(order).data,
            message='Order created successfully',
            status_code=status.HTTP_201_CREATED,
        )

    @extend_schema(responses={200: OrderResponseSerializer})
    def retrieve(self, request, pk=None):
        return _envelope(OrderSerializer(get_order(pk)).data)

    @extend_schema(request=OrderUpdateInputSerializer, responses={200: OrderResponseSerializer})
    def update(self, request, pk=None):
        order = update_order(order_id=pk, data=request.data)
        return _envelope(OrderSerializer(order).data, message='Order updated successfully')

    @extend_schema(request=OrderUpdateInputSerializer, responses={200: OrderResponseSerializer})
    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(responses={200: MessageResponseSerializer})
    def destroy(self, request, pk=None):
        delete_order(order_id=pk)
        return _envelope(message='Order deleted successfully')

    @extend_schema(responses={200: OrderListResponseSerializer})
    @action(detail=False, methods=['get'], url_path=r'customer/(?P<customer_id>[^/.]+)')
    def by_customer(self, request, customer_id=None):
        """Orders of one customer."""
        filter_serializer = OrderListQuerySerializer(data={'customer': customer_id})
        filter_serializer.is_valid(raise_exception=True)
        return self._paginated(
            list_orders(customer_id=filter_serializer.validated_data['customer'])
        )

    @extend_schema(responses={200: OrderResponseSerializer})
    @action(detail=False, methods=['get'], url_path=r'voucher/(?P<code>[^/.]+)')
    def by_voucher_code(self, request, code=None):
        """Order owning the voucher with this code."""
        return _envelope(OrderSerializer(get_order_by_voucher_code(code)).data)

    @extend_schema(request=None, responses={200: OrderResponseSerializer})
    @action(detail=False, methods=['put'], url_path=r'voucher/(?P<code>[^/.]+)/redeem')
    def redeem(self, request, code=None):
        """
        Redeem a voucher.

        Only admins and the manager of the voucher's store may redeem (403).
        Fails with 404 for an unknown code and 400 when the voucher was
        already redeemed, has expired or is otherwise not active.
        """
        self.check_object_permissions(request, get_order_by_voucher_code(code))
        order = redeem_voucher(code)
        return _envelope(OrderSerializer(order).data, message='Voucher redeemed successfully')

    def _resend(self, pk, resend, label):
        if resend(pk):
            return _envelope(message=f'{label} sent successfully')
        return _envelope(
            message=f'Failed to send {label.lower()}',
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            success=False,
        )

    @extend_schema(request=None, responses={200: MessageResponseSerializer})
    @action(detail=True, methods=['post'], url_path='resend-emails')
    def resend_emails(self, request, pk=None):
        return self._resend(pk, resend_all_emails_service, 'Voucher emails')

    @extend_schema(request=None, responses={200: MessageResponseSerializer})
    @action(detail=True, methods=['post'], url_path='resend-customer-email')
    def resend_customer_email(self, request, pk=None):
        return self._resend(pk, resend_customer_email_service, 'Customer email')

    @extend_schema(request=None, responses={200: MessageResponseSerializer})
    @action(detail=True, methods=['post'], url_path='resend-receiver-email')
    def resend_receiver_email(self, request, pk=None):
        return self._resend(pk, resend_receiver_email_service, 'Receiver email')

    @extend_schema(request=None, responses={200: MessageResponseSerializer})
    @action(detail=True, methods=['post'], url_path='resend-store-email')
    def resend_store_email(self, request, pk=None):
        return self._resend(pk, resend_store_email_service, 'Store email')

    @extend_schema(
        responses={(200, 'application/pdf'): OpenApiTypes.BINARY},
    )
    @action(detail=True, methods=['get'], url_path='download-pdf')
    def download_pdf(self, request, pk=None):
        """Voucher PDF as an attachment, generated first if needed."""
        order = get_order(pk)
        try:
            pdf_path = get_voucher_pdf(order.pk)
        except VoucherPdfError:
            return _envelope(
                message='Could not generate voucher PDF',
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                success=False,
            )
        return FileResponse(
            open(pdf_path, 'rb'),
            as_attachment=True,
            filename=voucher_pdf_filename(order.voucher.code),
            content_type='application/pdf',
        )

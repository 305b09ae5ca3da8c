"""
Authentication endpoints.

Service errors are DRF exceptions, so failures render through
config.exceptions.api_exception_handler like every other API error.
"""
from rest_framework import status, serializers, viewsets
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema, extend_schema_view
from .models import User
from .permissions import IsAdminRole, IsAdminOrStoreManager
from .serializers import (
    UserRegistrationSerializer,
    UserLoginSerializer,
    UserSerializer,
    PasswordResetRequestSerializer,
    PasswordResetConfirmSerializer,
    AdminUserSerializer,
    SetupAdminSerializer,
)
from .services import (
    register_user,
    authenticate_user,
    request_password_reset as request_password_reset_service,
    confirm_password_reset as confirm_password_reset_service,
    create_user,
    update_user,
    deactivate_user,
    setup_first_admin,
    UserNotFoundError,
)


class TokenPairSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class SessionResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokenPairSerializer()


class DetailResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorEnvelopeSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    status = serializers.CharField()
    message = serializers.CharField()
    errors = serializers.DictField(required=False)


class LogoutRequestSerializer(serializers.Serializer):
    refresh = serializers.CharField(help_text="Refresh token to validate", required=False)


def _session_response(user, message, status_code=status.HTTP_200_OK):
    refresh = RefreshToken.for_user(user)
    return Response({
        'message': message,
        'user': UserSerializer(user).data,
        'tokens': {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
        },
    }, status=status_code)


@extend_schema(
    request=UserRegistrationSerializer,
    responses={201: SessionResponseSerializer, 400: ErrorEnvelopeSerializer},
    description="Create a customer account and receive JWT tokens. Any role sent is ignored.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    data = dict(serializer.validated_data)
    data.pop('password_confirm', None)

    user = register_user(**data)
    return _session_response(user, 'Registration successful', status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: SessionResponseSerializer,
        400: ErrorEnvelopeSerializer,
        401: ErrorEnvelopeSerializer,
        403: ErrorEnvelopeSerializer,
    },
    description="Exchange email and password for JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    serializer = UserLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = authenticate_user(**serializer.validated_data)
    return _session_response(user, 'Login successful')


@extend_schema(
    request=LogoutRequestSerializer,
    responses={200: DetailResponseSerializer, 400: ErrorEnvelopeSerializer},
    description="Logout. JWTs are stateless, so the client discards its tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """A refresh token, when supplied, must at least be well-formed and unexpired."""
    refresh_token = request.data.get('refresh')
    if refresh_token:
        try:
            RefreshToken(refresh_token)
        except TokenError:
            raise ValidationError({'refresh': 'Invalid token'})

    return Response({'message': 'Logout successful'})


@extend_schema(
    responses={200: UserSerializer},
    description="Profile of the authenticated user.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    return Response(UserSerializer(request.user).data)


@extend_schema(
    request=UserSerializer,
    responses={200: UserSerializer, 400: ErrorEnvelopeSerializer},
    description="Change the display name of the authenticated user. The role is read-only.",
    tags=['auth'],
)
@api_view(['PATCH', 'PUT'])
@permission_classes([IsAuthenticated])
def update_profile(request):
    serializer = UserSerializer(request.user, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    serializer.save()
    return Response(serializer.data)


@extend_schema(
    request=PasswordResetRequestSerializer,
    responses={200: DetailResponseSerializer},
    description="Email a password reset token. Answers the same whether or not the account exists.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def request_password_reset(request):
    serializer = PasswordResetRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        request_password_reset_service(email=serializer.validated_data['email'])
    except UserNotFoundError:
        pass

    return Response({'message': 'If account exists, password reset email has been sent'})


@extend_schema(
    request=PasswordResetConfirmSerializer,
    responses={200: DetailResponseSerializer, 400: ErrorEnvelopeSerializer},
    description="Set a new password using a reset token.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def confirm_password_reset(request):
    serializer = PasswordResetConfirmSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    confirm_password_reset_service(
        token=serializer.validated_data['token'],
        new_password=serializer.validated_data['new_password'],
    )
    return Response({'message': 'Password reset successful'})


@extend_schema(
    request=SetupAdminSerializer,
    responses={201: SessionResponseSerializer, 403: ErrorEnvelopeSerializer},
    description="Create the first admin of a fresh installation. Closed once any admin exists.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def setup_admin(request):
    serializer = SetupAdminSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = setup_first_admin(**serializer.validated_data)
    return _session_response(user, 'Admin user created successfully', status.HTTP_201_CREATED)


class UserPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


@extend_schema_view(
    list=extend_schema(description="All accounts (?role=, ?search=). Admin only."),
    retrieve=extend_schema(description="One account. Admins and store managers."),
    create=extend_schema(description="Create an account of any role, e.g. a store manager."),
    update=extend_schema(description="Change name, role, active flag or password."),
    partial_update=extend_schema(description="Change name, role, active flag or password."),
    destroy=extend_schema(description="Deactivate an account. Owned stores and orders are kept."),
)
@extend_schema(tags=['users'])
class UserViewSet(viewsets.ModelViewSet):
    """
    Admin user management.

    Stores and orders reference their users, so destroy deactivates the
    account instead of deleting the row.
    """

    queryset = User.objects.all().order_by('-created_at')
    serializer_class = AdminUserSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]
    pagination_class = UserPagination

    def get_permissions(self):
        if self.action == 'retrieve':
            return [IsAuthenticated(), IsAdminOrStoreManager()]
        return super().get_permissions()

    def get_queryset(self):
        queryset = super().get_queryset()
        role = self.request.query_params.get('role')
        if role:
            queryset = queryset.filter(role=role)
        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(email__icontains=search)
        return queryset

    def perform_create(self, serializer):
        data = dict(serializer.validated_data)
        data.pop('is_active', None)
        serializer.instance = create_user(**data)

    def perform_update(self, serializer):
        serializer.instance = update_user(
            user=serializer.instance,
            data=dict(serializer.validated_data),
        )

    def destroy(self, request, *args, **kwargs):
        user = self.get_object()
        if user.pk == request.user.pk:
            raise ValidationError({'detail': 'You cannot deactivate your own account.'})
        deactivate_user(user=user)
        return Response(status=status.HTTP_204_NO_CONTENT)

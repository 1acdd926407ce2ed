from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema
from .serializers import (
    UserRegistrationSerializer,
    UserLoginSerializer,
    UserSerializer,
    UpgradeRoleSerializer,
    SetRoleSerializer,
    RoleChangeSerializer,
)
from .services import (
    register_user,
    authenticate_user,
    upgrade_role,
    set_user_role,
    get_role_history,
    # Exceptions
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    UserNotFoundError,
    PermissionDeniedError,
    IllegalDowngradeError,
    RoleUpgradeUnavailableError,
)
from apps.invites.services import (
    InvalidInviteCodeError,
    InviteCodeExpiredError,
    InviteCodeAlreadyUsedError,
    InviteCodeExhaustedError,
)


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class UpgradeResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


def _tokens_for(user):
    refresh = RefreshToken.for_user(user)
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


@extend_schema(
    request=UserRegistrationSerializer,
    responses={
        201: AuthResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Register a new student account and receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Register a new user account."""
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    # Remove password_confirm before passing to service
    data = serializer.validated_data.copy()
    data.pop('password_confirm', None)

    try:
        user = register_user(**data)
    except UserRegistrationError as e:
        return Response(
            {'error': str(e)},
            status=status.HTTP_400_BAD_REQUEST
        )

    return Response({
        'message': 'Registration successful',
        'user': UserSerializer(user).data,
        'tokens': _tokens_for(user),
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate with email and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with email and password."""
    serializer = UserLoginSerializer(data=request.data)

    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        user = authenticate_user(
            email=serializer.validated_data['email'],
            password=serializer.validated_data['password']
        )
    except InvalidCredentialsError as e:
        return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
    except InactiveAccountError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response({
        'message': 'Login successful',
        'user': UserSerializer(user).data,
        'tokens': _tokens_for(user),
    })


@extend_schema(
    responses={200: UserSerializer},
    description="Get the current authenticated user's profile.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Get current authenticated user profile."""
    return Response(UserSerializer(request.user).data)


@extend_schema(
    request=UpgradeRoleSerializer,
    responses={
        200: UpgradeResponseSerializer,
        400: ErrorResponseSerializer,
        409: ErrorResponseSerializer,
        503: ErrorResponseSerializer,
    },
    description="Upgrade the current user's role with an invite code.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def upgrade(request):
    """Upgrade role with an invite code."""
    serializer = UpgradeRoleSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        new_role = upgrade_role(
            user=request.user,
            code=serializer.validated_data['invite_code']
        )
    except (InvalidInviteCodeError, InviteCodeExpiredError, IllegalDowngradeError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except (InviteCodeAlreadyUsedError, InviteCodeExhaustedError) as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
    except RoleUpgradeUnavailableError as e:
        return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

    return Response({
        'message': f'Successfully upgraded to {new_role}',
        'user': UserSerializer(request.user).data,
    })


@extend_schema(
    responses={200: RoleChangeSerializer(many=True)},
    description="Get the current user's role history, oldest first.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def role_history(request):
    """Get current user's role history."""
    history = get_role_history(user=request.user)
    return Response(RoleChangeSerializer(history, many=True).data)


@extend_schema(
    request=SetRoleSerializer,
    responses={
        200: UserSerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Assign a role to a user (admin only).",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def set_role(request, pk):
    """Set a user's role."""
    serializer = SetRoleSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = set_user_role(
            user_id=pk,
            role=serializer.validated_data['role'],
            updated_by=request.user
        )
    except PermissionDeniedError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except UserNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(UserSerializer(user).data)

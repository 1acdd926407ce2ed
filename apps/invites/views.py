from rest_framework import serializers, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter, inline_serializer

from django.utils import timezone

from .permissions import CanManageInviteCodes
from .serializers import (
    InviteCodeSerializer,
    InviteCodeCreateSerializer,
    InviteCodeFilterSerializer,
    ActivateInviteCodeSerializer,
    SessionSerializer,
)

from apps.accounts.services.session_store import UserSession
from apps.devices.fingerprint import DeviceFingerprint
from apps.invites.services import (
    generate_invite_code,
    revoke_invite_code,
    unbind_device,
    list_invite_codes,
    get_unused_codes,
    get_used_codes,
    bind_invite_code,
    # Exceptions
    InvalidInviteCodeError,
    InviteCodeExpiredError,
    InviteCodeAlreadyUsedError,
    InviteCodeExhaustedError,
    InviteCodeNotFoundError,
    ActivationUnavailableError,
)


ErrorResponseSerializer = inline_serializer(
    name='InviteErrorResponse',
    fields={'error': serializers.CharField()},
)


@extend_schema(
    parameters=[
        OpenApiParameter('role', str, description="student, core_member or admin"),
        OpenApiParameter('state', str, description="all, used or unused"),
    ],
    responses={200: InviteCodeSerializer(many=True)},
    description="List invite codes (admin only).",
    tags=['invites'],
    methods=['GET'],
)
@extend_schema(
    request=InviteCodeCreateSerializer,
    responses={201: InviteCodeSerializer, 403: ErrorResponseSerializer},
    description="Generate a new invite code (admin only).",
    tags=['invites'],
    methods=['POST'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, CanManageInviteCodes])
def invite_codes(request):
    """List or generate invite codes."""
    if request.method == 'POST':
        serializer = InviteCodeCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        invite = generate_invite_code(created_by=request.user, **serializer.validated_data)
        return Response(InviteCodeSerializer(invite).data, status=status.HTTP_201_CREATED)

    filters = InviteCodeFilterSerializer(data=request.query_params)
    filters.is_valid(raise_exception=True)

    state = filters.validated_data['state']
    if state == 'used':
        codes = get_used_codes()
    elif state == 'unused':
        codes = get_unused_codes()
    else:
        codes = list_invite_codes()

    role = filters.validated_data.get('role')
    if role:
        codes = codes.filter(role=role)

    return Response(InviteCodeSerializer(codes, many=True).data)


@extend_schema(
    responses={204: None, 404: ErrorResponseSerializer},
    description="Revoke (delete) an invite code regardless of its state (admin only).",
    tags=['invites'],
)
@api_view(['DELETE'])
@permission_classes([IsAuthenticated, CanManageInviteCodes])
def revoke(request, code):
    """Revoke an invite code."""
    try:
        revoke_invite_code(code=code, revoked_by=request.user)
    except InviteCodeNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(
    request=None,
    responses={200: InviteCodeSerializer, 404: ErrorResponseSerializer},
    description="Release an invite code from its device so it can be activated again (admin only).",
    tags=['invites'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, CanManageInviteCodes])
def unbind(request, code):
    """Unbind the device from an invite code."""
    try:
        invite = unbind_device(code=code, unbound_by=request.user)
    except InviteCodeNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(InviteCodeSerializer(invite).data)


@extend_schema(
    request=ActivateInviteCodeSerializer,
    responses={
        200: SessionSerializer,
        400: ErrorResponseSerializer,
        409: ErrorResponseSerializer,
        503: ErrorResponseSerializer,
    },
    description=(
        "Activate an invite code on a device and receive the granted session. "
        "The session lives on the device; it carries no API token."
    ),
    tags=['invites'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def activate(request):
    """Activate an invite code; binds it to the device supplied by the client."""
    serializer = ActivateInviteCodeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    device = DeviceFingerprint.from_dict(serializer.validated_data['device'])

    try:
        invite = bind_invite_code(
            code=serializer.validated_data['code'],
            user_info=serializer.validated_data['user_info'],
            device=device
        )
    except (InvalidInviteCodeError, InviteCodeExpiredError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except (InviteCodeAlreadyUsedError, InviteCodeExhaustedError) as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
    except ActivationUnavailableError as e:
        return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

    session = UserSession(
        is_authenticated=True,
        identity=invite.activated_by,
        role=invite.role,
        bound_device=device,
        source_invite_code=invite.code,
        authenticated_at=timezone.now(),
    )
    return Response(session.to_dict())

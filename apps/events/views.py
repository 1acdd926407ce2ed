from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .models import Event
from .serializers import (
    EventSerializer,
    EventListSerializer,
    EventWriteSerializer,
    EventFilterSerializer,
    RsvpResultSerializer,
)

from apps.accounts.services.exceptions import PermissionDeniedError
from apps.events.services import (
    create_event,
    update_event,
    delete_event,
    get_event_by_id,
    list_events,
    get_my_events,
    get_my_rsvp_events,
    rsvp,
    cancel_rsvp,
    get_rsvp_status,
    # Exceptions
    EventNotFoundError,
    MembershipFieldError,
    InvalidEventFilterError,
    RegistrationUnavailableError,
    CapacityBelowAttendeesError,
)


class EventPagination(PageNumberPagination):
    """Custom pagination for events."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class EventViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Event CRUD operations.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Get published events (filterable)
    create: Create an event (core member or admin)
    retrieve: Get a specific event
    partial_update: Edit an event (organizer or admin)
    destroy: Delete an event (organizer or admin)
    """

    queryset = Event.objects.select_related('organizer_user')
    serializer_class = EventSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = EventPagination
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']
    lookup_value_regex = '[0-9a-f-]{36}'

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'list':
            return EventListSerializer
        elif self.action in ['create', 'partial_update']:
            return EventWriteSerializer
        return EventSerializer

    @extend_schema(
        parameters=[
            OpenApiParameter('category', str, description="Category or 'all'"),
            OpenApiParameter('time_range', str, description="all, today, week or month"),
            OpenApiParameter('status', str, description="all, upcoming, past or my_events"),
        ],
    )
    def list(self, request, *args, **kwargs):
        """List events with filters."""
        filters = EventFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)

        try:
            events = list_events(
                user_id=request.user.id,
                **filters.validated_data
            )
        except InvalidEventFilterError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        page = self.paginate_queryset(events)
        if page is not None:
            serializer = EventListSerializer(page, many=True)
            return self.get_paginated_response(serializer.data)

        serializer = EventListSerializer(events, many=True)
        return Response(serializer.data)

    def retrieve(self, request, *args, **kwargs):
        """Get event detail."""
        try:
            event = get_event_by_id(event_id=self.kwargs['pk'])
        except EventNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        serializer = EventSerializer(event, context={'request': request})
        return Response(serializer.data)

    def create(self, request, *args, **kwargs):
        """Create a new event."""
        serializer = EventWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            event = create_event(organizer=request.user, **serializer.validated_data)
        except PermissionDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        output_serializer = EventSerializer(event, context={'request': request})
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        """Edit an event. Only partial updates are accepted."""
        if not kwargs.get('partial', False):
            return Response(
                {'error': 'Use PATCH to edit events'},
                status=status.HTTP_405_METHOD_NOT_ALLOWED
            )

        if any(name in request.data for name in ('attendees', 'waiting_list')):
            return Response(
                {'error': 'attendees and waiting_list can only be changed by RSVP or cancellation'},
                status=status.HTTP_400_BAD_REQUEST
            )

        serializer = EventWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            event = update_event(
                event_id=self.kwargs['pk'],
                user=request.user,
                **serializer.validated_data
            )
        except EventNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except PermissionDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except (MembershipFieldError, CapacityBelowAttendeesError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        output_serializer = EventSerializer(event, context={'request': request})
        return Response(output_serializer.data)

    def destroy(self, request, *args, **kwargs):
        """Delete an event."""
        try:
            delete_event(event_id=self.kwargs['pk'], user=request.user)
            return Response(status=status.HTTP_204_NO_CONTENT)
        except EventNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except PermissionDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    @extend_schema(request=None, responses={200: RsvpResultSerializer})
    @action(detail=True, methods=['post'])
    def rsvp(self, request, pk=None):
        """RSVP for an event; joins the waiting list when full."""
        try:
            result = rsvp(event_id=pk, user_id=request.user.id)
        except EventNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except RegistrationUnavailableError as e:
            return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response({'event_id': pk, 'status': result})

    @extend_schema(request=None, responses={200: RsvpResultSerializer})
    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        """Cancel RSVP; the head of the waiting list takes the freed seat."""
        try:
            promoted = cancel_rsvp(event_id=pk, user_id=request.user.id)
        except EventNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except RegistrationUnavailableError as e:
            return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response({
            'event_id': pk,
            'status': 'not_registered',
            'promoted_user_id': promoted,
        })

    @extend_schema(responses={200: RsvpResultSerializer})
    @action(detail=True, methods=['get'], url_path='status')
    def rsvp_status(self, request, pk=None):
        """Get current user's RSVP status."""
        try:
            result = get_rsvp_status(event_id=pk, user_id=request.user.id)
        except EventNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response({'event_id': pk, 'status': result})


@extend_schema(
    responses={200: EventSerializer(many=True)},
    description="Get all events organised by the current user.",
    tags=['events'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_events(request):
    """Get events organised by the current user."""
    events = get_my_events(organizer=request.user)
    serializer = EventSerializer(events, many=True, context={'request': request})
    return Response(serializer.data)


@extend_schema(
    responses={200: EventListSerializer(many=True)},
    description="Get all events the current user is registered or waiting for.",
    tags=['events'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_rsvps(request):
    """Get events the current user has RSVP'd to."""
    events = get_my_rsvp_events(user_id=request.user.id)
    serializer = EventListSerializer(events, many=True)
    return Response(serializer.data)

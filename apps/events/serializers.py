from rest_framework import serializers
from .models import Event, EventCategory
from apps.accounts.models import User


class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user info for nested serialization."""

    display_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'email', 'display_name']
        read_only_fields = fields

    def get_display_name(self, obj):
        return obj.get_display_name()


class EventSerializer(serializers.ModelSerializer):
    """Main serializer for events."""

    organizer_user = UserMinimalSerializer(read_only=True)
    attendee_count = serializers.IntegerField(read_only=True)
    waiting_list_count = serializers.IntegerField(read_only=True)
    is_full = serializers.BooleanField(read_only=True)
    rsvp_status = serializers.SerializerMethodField()

    class Meta:
        model = Event
        fields = [
            'id',
            'title',
            'description',
            'date',
            'time',
            'location',
            'organizer',
            'organizer_user',
            'category',
            'max_attendees',
            'attendees',
            'waiting_list',
            'attendee_count',
            'waiting_list_count',
            'is_full',
            'rsvp_status',
            'is_published',
            'requirements',
            'contact_info',
            'created_at',
            'updated_at',
        ]
        read_only_fields = [
            'id',
            'organizer_user',
            'attendees',
            'waiting_list',
            'created_at',
            'updated_at',
        ]

    def get_rsvp_status(self, obj):
        """Get current user's RSVP status for the event."""
        request = self.context.get('request')
        if request and request.user.is_authenticated:
            return obj.rsvp_status(request.user.id)
        return None


class EventListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    attendee_count = serializers.IntegerField(read_only=True)
    waiting_list_count = serializers.IntegerField(read_only=True)
    is_full = serializers.BooleanField(read_only=True)

    class Meta:
        model = Event
        fields = [
            'id',
            'title',
            'date',
            'time',
            'location',
            'organizer',
            'category',
            'max_attendees',
            'attendee_count',
            'waiting_list_count',
            'is_full',
        ]
        read_only_fields = fields


class EventWriteSerializer(serializers.ModelSerializer):
    """Serializer for creating and editing events. Membership lists are not writable."""

    class Meta:
        model = Event
        fields = [
            'title',
            'description',
            'date',
            'time',
            'location',
            'organizer',
            'category',
            'max_attendees',
            'is_published',
            'requirements',
            'contact_info',
        ]
        extra_kwargs = {
            'max_attendees': {'min_value': 1},
        }


class EventFilterSerializer(serializers.Serializer):
    """Query parameters accepted by the event list."""

    category = serializers.ChoiceField(
        choices=['all', *EventCategory.values],
        required=False,
        default='all'
    )
    time_range = serializers.ChoiceField(
        choices=['all', 'today', 'week', 'month'],
        required=False,
        default='all'
    )
    status = serializers.ChoiceField(
        choices=['all', 'upcoming', 'past', 'my_events'],
        required=False,
        default='upcoming'
    )


class RsvpResultSerializer(serializers.Serializer):
    """Result of an RSVP or cancellation."""

    event_id = serializers.UUIDField()
    status = serializers.CharField()
    promoted_user_id = serializers.CharField(required=False, allow_null=True)

"""
Event management service.

Handles event CRUD and list queries. Membership lists are only written
here when a capacity change frees seats for the waiting list.
"""

import logging
from datetime import timedelta
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.services.role_policy import Capability, has_capability, require_capability
from apps.accounts.services.exceptions import PermissionDeniedError
from apps.events.models import Event, MEMBERSHIP_FIELDS

from .exceptions import (
    CapacityBelowAttendeesError,
    EventNotFoundError,
    InvalidEventFilterError,
    MembershipFieldError,
)
from .registration import lock_event, promote_waiters

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
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
)

TIME_RANGES = ('all', 'today', 'week', 'month')
STATUSES = ('all', 'upcoming', 'past', 'my_events')


def _reject_membership_fields(fields: dict) -> None:
    touched = [name for name in MEMBERSHIP_FIELDS if name in fields]
    if touched:
        raise MembershipFieldError(
            f"{', '.join(touched)} can only be changed by RSVP or cancellation"
        )


def create_event(*, organizer: User, **fields) -> Event:
    """
    Create an event (core members and admins).

    Args:
        organizer: User creating the event
        **fields: Event fields from EDITABLE_FIELDS

    Returns:
        Created Event instance with empty attendee and waiting lists

    Raises:
        PermissionDeniedError: If organizer cannot create events
        MembershipFieldError: If attendees or waiting_list were passed
    """
    require_capability(
        organizer.role,
        Capability.CREATE_EVENTS,
        "Only core members and admins can create events",
    )
    _reject_membership_fields(fields)

    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise TypeError(f"Unknown event fields: {', '.join(sorted(unknown))}")

    fields.setdefault('organizer', organizer.get_display_name())
    event = Event.objects.create(organizer_user=organizer, **fields)

    logger.info("Event %s (%s) created by %s", event.id, event.title, organizer.email)
    return event


def get_event_by_id(*, event_id: UUID) -> Event:
    """
    Get an event by ID.

    Raises:
        EventNotFoundError: If event doesn't exist
    """
    try:
        return Event.objects.select_related('organizer_user').get(id=event_id)
    except (Event.DoesNotExist, ValidationError):
        raise EventNotFoundError(f"Event with ID {event_id} not found")


def _can_manage(user: User, event: Event, capability: str) -> bool:
    if has_capability(user.role, capability):
        return True
    return (
        event.organizer_user_id == user.id
        and has_capability(user.role, Capability.CREATE_EVENTS)
    )


@transaction.atomic
def update_event(*, event_id: UUID, user: User, **fields) -> Event:
    """
    Update event details (organizer or admin).

    Last writer wins on the edited fields. Membership columns are only
    written when a new capacity lets waiters move up, and the row is
    locked for that, so a concurrent RSVP is not lost.

    Args:
        event_id: UUID of the event
        user: User performing the update
        **fields: Fields from EDITABLE_FIELDS to change

    Returns:
        Updated Event instance

    Raises:
        EventNotFoundError: If event doesn't exist
        PermissionDeniedError: If user is neither organizer nor allowed to edit all events
        MembershipFieldError: If attendees or waiting_list were passed
        CapacityBelowAttendeesError: If max_attendees is below the attendee count
    """
    _reject_membership_fields(fields)

    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise TypeError(f"Unknown event fields: {', '.join(sorted(unknown))}")

    event = lock_event(event_id)

    if not _can_manage(user, event, Capability.EDIT_ALL_EVENTS):
        raise PermissionDeniedError("Only the organizer or an admin can edit this event")

    capacity_changed = 'max_attendees' in fields
    if capacity_changed:
        max_attendees = fields['max_attendees']
        if max_attendees is not None and max_attendees < len(event.attendees):
            raise CapacityBelowAttendeesError(
                f"max_attendees cannot be below the {len(event.attendees)} registered attendees"
            )

    update_fields = ['updated_at']
    for name, value in fields.items():
        setattr(event, name, value)
        update_fields.append(name)

    promoted = []
    if capacity_changed:
        promoted = promote_waiters(event)
        if promoted:
            update_fields.extend(MEMBERSHIP_FIELDS)

    event.save(update_fields=update_fields)

    if promoted:
        logger.info(
            "Capacity of event %s raised by %s; promoted %s from waiting list",
            event.id, user.email, ', '.join(promoted),
        )
    return event


@transaction.atomic
def delete_event(*, event_id: UUID, user: User) -> None:
    """
    Delete an event (organizer or admin). Hard delete.

    Raises:
        EventNotFoundError: If event doesn't exist
        PermissionDeniedError: If user is neither organizer nor allowed to delete all events
    """
    event = lock_event(event_id)

    if not _can_manage(user, event, Capability.DELETE_ALL_EVENTS):
        raise PermissionDeniedError("Only the organizer or an admin can delete this event")

    event.delete()
    logger.info("Event %s deleted by %s", event_id, user.email)


def list_events(
    *,
    category: str = 'all',
    time_range: str = 'all',
    status: str = 'upcoming',
    user_id: Optional[str] = None,
    published_only: bool = True
) -> QuerySet[Event]:
    """
    List events for display. Plain read, may be momentarily stale.

    Args:
        category: Category value or 'all'
        time_range: 'all', 'today', 'week' (next 7 days) or 'month' (next 30 days)
        status: 'all', 'upcoming', 'past' or 'my_events' (needs user_id)
        user_id: Viewer id, used by 'my_events'
        published_only: Hide unpublished events

    Raises:
        InvalidEventFilterError: If a filter value is not recognised
    """
    if time_range not in TIME_RANGES:
        raise InvalidEventFilterError(f"Invalid time range: {time_range!r}")
    if status not in STATUSES:
        raise InvalidEventFilterError(f"Invalid status: {status!r}")

    events = Event.objects.select_related('organizer_user')
    if published_only:
        events = events.filter(is_published=True)

    if category != 'all':
        events = events.filter(category=category)

    today = timezone.localdate()
    if time_range == 'today':
        events = events.filter(date=today)
    elif time_range == 'week':
        events = events.filter(date__gte=today, date__lte=today + timedelta(days=7))
    elif time_range == 'month':
        events = events.filter(date__gte=today, date__lte=today + timedelta(days=30))

    if status == 'upcoming':
        events = events.filter(date__gte=today)
    elif status == 'past':
        events = events.filter(date__lt=today)
    elif status == 'my_events':
        if not user_id:
            raise InvalidEventFilterError("my_events requires a user")
        events = _with_member(events, str(user_id))

    return events.order_by('date', 'time')


def _with_member(events: QuerySet[Event], user_id: str) -> QuerySet[Event]:
    # JSON containment isn't available on SQLite; filter the ids in Python
    ids = [
        event_id
        for event_id, attendees, waiting_list in events.values_list('id', 'attendees', 'waiting_list')
        if user_id in attendees or user_id in waiting_list
    ]
    return events.filter(id__in=ids)


def get_my_events(*, organizer: User) -> QuerySet[Event]:
    """Events organised by ``organizer``, including unpublished ones."""
    return Event.objects.filter(organizer_user=organizer).order_by('date', 'time')


def get_my_rsvp_events(*, user_id) -> QuerySet[Event]:
    """Events where the user is registered or waiting."""
    return _with_member(Event.objects.all(), str(user_id)).order_by('date', 'time')

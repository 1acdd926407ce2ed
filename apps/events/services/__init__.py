"""
Events app services layer.

Event CRUD lives in event_management; the attendee and waiting lists are
changed only by registration.
"""

from .exceptions import (
    EventsServiceError,
    EventNotFoundError,
    MembershipFieldError,
    InvalidEventFilterError,
    RegistrationUnavailableError,
    CapacityBelowAttendeesError,
)

from .event_management import (
    EDITABLE_FIELDS,
    create_event,
    update_event,
    delete_event,
    get_event_by_id,
    list_events,
    get_my_events,
    get_my_rsvp_events,
)

from .registration import (
    rsvp,
    cancel_rsvp,
    get_rsvp_status,
)


__all__ = [
    # Exceptions
    'EventsServiceError',
    'EventNotFoundError',
    'MembershipFieldError',
    'InvalidEventFilterError',
    'RegistrationUnavailableError',
    'CapacityBelowAttendeesError',

    # Event management
    'EDITABLE_FIELDS',
    'create_event',
    'update_event',
    'delete_event',
    'get_event_by_id',
    'list_events',
    'get_my_events',
    'get_my_rsvp_events',

    # Registration
    'rsvp',
    'cancel_rsvp',
    'get_rsvp_status',
]

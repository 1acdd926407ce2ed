"""
Domain-specific exceptions for events app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses. A full
event is not an error: RSVPs beyond capacity go to the waiting list.
"""


class EventsServiceError(Exception):
    """Base exception for all events service errors."""
    pass


class EventNotFoundError(EventsServiceError):
    """Raised when an event does not exist."""
    pass


class MembershipFieldError(EventsServiceError):
    """Raised when an edit tries to write attendees or the waiting list directly."""
    pass


class InvalidEventFilterError(EventsServiceError):
    """Raised when an event list filter value is not recognised."""
    pass


class RegistrationUnavailableError(EventsServiceError):
    """
    Raised when the store could not complete an RSVP transaction.

    Retryable: nothing was written. The core does not retry on its own.
    """
    pass


class CapacityBelowAttendeesError(EventsServiceError):
    """Raised when an edit would set max_attendees below the registered count."""
    pass

"""
Registration service.

RSVP and cancellation against one event's attendee and waiting lists.
Each call is one transaction with the event row locked, so the capacity
check and the append (or the removal and the promotion) cannot interleave
with another call on the same event.
"""

import logging
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from apps.events.models import Event, RsvpStatus

from .exceptions import EventNotFoundError, RegistrationUnavailableError

logger = logging.getLogger(__name__)


def lock_event(event_id: UUID) -> Event:
    """
    Load an event with its row locked. Call inside a transaction.

    Raises:
        EventNotFoundError: If event doesn't exist or the id is malformed
    """
    try:
        return (
            Event.objects
            .select_for_update()
            .get(id=event_id)
        )
    except (Event.DoesNotExist, ValidationError):
        raise EventNotFoundError(f"Event with ID {event_id} not found")


def promote_waiters(event: Event) -> list:
    """
    Move waiters from the head of the waiting list into free seats.

    Mutates ``event`` in memory only; the caller saves it in the same
    transaction that locked the row.

    Returns:
        Promoted user ids, oldest waiter first
    """
    attendees = list(event.attendees)
    waiting_list = list(event.waiting_list)
    promoted = []

    while waiting_list and (
        event.max_attendees is None or len(attendees) < event.max_attendees
    ):
        user_id = waiting_list.pop(0)
        attendees.append(user_id)
        promoted.append(user_id)

    event.attendees = attendees
    event.waiting_list = waiting_list
    return promoted


def rsvp(*, event_id: UUID, user_id) -> str:
    """
    Register a user for an event, or put them on the waiting list.

    Idempotent: a user already on either list gets their current status
    back and nothing is written.

    Args:
        event_id: UUID of the event
        user_id: Id of the registering user

    Returns:
        'registered' or 'waiting_list'

    Raises:
        EventNotFoundError: If event doesn't exist
        RegistrationUnavailableError: If the transaction failed (retryable)
    """
    user_id = str(user_id)

    try:
        with transaction.atomic():
            event = lock_event(event_id)

            status = event.rsvp_status(user_id)
            if status != RsvpStatus.NOT_REGISTERED:
                return status

            # Never jump ahead of someone already waiting
            if event.is_full or event.waiting_list:
                event.waiting_list = [*event.waiting_list, user_id]
                status = RsvpStatus.WAITING_LIST
            else:
                event.attendees = [*event.attendees, user_id]
                status = RsvpStatus.REGISTERED

            event.save(update_fields=['attendees', 'waiting_list', 'updated_at'])
    except DatabaseError as e:
        logger.warning("RSVP of %s for event %s failed: %s", user_id, event_id, e)
        raise RegistrationUnavailableError("Failed to RSVP for event, please try again")

    logger.info("User %s -> %s for event %s", user_id, status, event_id)
    return status


def cancel_rsvp(*, event_id: UUID, user_id) -> Optional[str]:
    """
    Withdraw a user from an event.

    An attendee leaving frees a seat that goes to the head of the waiting
    list. A waiter leaving promotes nobody. A user on neither list is a
    no-op.

    Args:
        event_id: UUID of the event
        user_id: Id of the cancelling user

    Returns:
        Id of the user promoted from the waiting list, or None

    Raises:
        EventNotFoundError: If event doesn't exist
        RegistrationUnavailableError: If the transaction failed (retryable)
    """
    user_id = str(user_id)
    promoted = None

    try:
        with transaction.atomic():
            event = lock_event(event_id)

            if user_id in event.attendees:
                event.attendees = [a for a in event.attendees if a != user_id]
                promoted_ids = promote_waiters(event)
                if promoted_ids:
                    promoted = promoted_ids[0]
            elif user_id in event.waiting_list:
                event.waiting_list = [w for w in event.waiting_list if w != user_id]
            else:
                return None

            event.save(update_fields=['attendees', 'waiting_list', 'updated_at'])
    except DatabaseError as e:
        logger.warning("Cancel of %s for event %s failed: %s", user_id, event_id, e)
        raise RegistrationUnavailableError("Failed to cancel RSVP, please try again")

    if promoted:
        logger.info(
            "User %s cancelled for event %s; promoted %s from waiting list",
            user_id, event_id, promoted,
        )
    else:
        logger.info("User %s cancelled for event %s", user_id, event_id)
    return promoted


def get_rsvp_status(*, event_id: UUID, user_id) -> str:
    """
    Current status of a user for an event. Plain read, may be stale.

    Raises:
        EventNotFoundError: If event doesn't exist
    """
    try:
        event = Event.objects.only('attendees', 'waiting_list').get(id=event_id)
    except (Event.DoesNotExist, ValidationError):
        raise EventNotFoundError(f"Event with ID {event_id} not found")

    return event.rsvp_status(user_id)

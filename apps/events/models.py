# ==========================================
# apps/events/models.py
# ==========================================

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
import uuid


class EventCategory(models.TextChoices):
    WORSHIP = 'worship', 'Worship'
    STUDY = 'study', 'Bible Study'
    FELLOWSHIP = 'fellowship', 'Fellowship'
    BLENDING = 'blending', 'Blending'
    PRAYER = 'prayer', 'Prayer'


class RsvpStatus(models.TextChoices):
    REGISTERED = 'registered', 'Registered'
    WAITING_LIST = 'waiting_list', 'Waiting List'
    NOT_REGISTERED = 'not_registered', 'Not Registered'


# Written only by the registration service
MEMBERSHIP_FIELDS = ('attendees', 'waiting_list')


class Event(models.Model):
    """Ministry event with a capacity-limited attendee list and FIFO waiting list."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    date = models.DateField()
    time = models.TimeField(null=True, blank=True)
    location = models.CharField(max_length=200, blank=True)
    organizer = models.CharField(max_length=100, blank=True)
    organizer_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='organized_events',
        db_column='organizer_id',
    )
    category = models.CharField(max_length=20, choices=EventCategory.choices)
    max_attendees = models.PositiveIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1)],
    )

    # Ordered user ids; attendees in registration order, waiting_list FIFO
    attendees = models.JSONField(default=list, blank=True)
    waiting_list = models.JSONField(default=list, blank=True)

    is_published = models.BooleanField(default=True)
    requirements = models.TextField(blank=True)
    contact_info = models.CharField(max_length=200, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'events'
        indexes = [
            models.Index(fields=['is_published', 'date'], name='events_published_date_idx'),
            models.Index(fields=['organizer_user', 'date'], name='events_organizer_date_idx'),
            models.Index(fields=['category'], name='events_category_idx'),
        ]
        ordering = ['date', 'time']

    def __str__(self):
        return self.title

    @property
    def attendee_count(self):
        return len(self.attendees)

    @property
    def waiting_list_count(self):
        return len(self.waiting_list)

    @property
    def is_full(self):
        return self.max_attendees is not None and len(self.attendees) >= self.max_attendees

    def rsvp_status(self, user_id):
        user_id = str(user_id)
        if user_id in self.attendees:
            return RsvpStatus.REGISTERED
        if user_id in self.waiting_list:
            return RsvpStatus.WAITING_LIST
        return RsvpStatus.NOT_REGISTERED

# ==========================================
# apps/events/admin.py
# ==========================================

from django.contrib import admin
from apps.events.models import Event


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    """Admin interface for Events."""

    list_display = [
        'title',
        'date',
        'time',
        'category',
        'organizer',
        'attendee_count',
        'max_attendees',
        'waiting_list_count',
        'is_published',
    ]
    list_filter = ['category', 'is_published', 'date']
    search_fields = ['title', 'description', 'location', 'organizer', 'organizer_user__email']
    # Membership lists are changed only through RSVP and cancellation
    readonly_fields = ['attendees', 'waiting_list', 'created_at', 'updated_at']
    date_hierarchy = 'date'
    ordering = ['-date']

    fieldsets = (
        ('Basic Information', {
            'fields': ('title', 'description', 'category', 'is_published')
        }),
        ('Schedule', {
            'fields': ('date', 'time', 'location')
        }),
        ('Organizer', {
            'fields': ('organizer', 'organizer_user', 'contact_info', 'requirements')
        }),
        ('Registration', {
            'fields': ('max_attendees', 'attendees', 'waiting_list')
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def get_readonly_fields(self, request, obj=None):
        # Capacity of an existing event changes only through update_event
        if obj is not None:
            return [*self.readonly_fields, 'max_attendees']
        return self.readonly_fields

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('organizer_user')

# ==========================================
# apps/invites/admin.py
# ==========================================

from django.contrib import admin
from apps.invites.models import InviteCode
from apps.invites.services import unbind_device


@admin.register(InviteCode)
class InviteCodeAdmin(admin.ModelAdmin):
    """Admin interface for Invite Codes."""

    list_display = [
        'code',
        'role',
        'created_for',
        'is_used',
        'uses',
        'expires_at',
        'created_at'
    ]
    list_filter = ['role', 'is_used', 'created_at']
    search_fields = ['code', 'created_for', 'description', 'created_by__email']
    readonly_fields = [
        'code',
        'created_at',
        'is_used',
        'used_at',
        'bound_device',
        'activated_by',
        'current_uses',
    ]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('code', 'role', 'created_for', 'created_by', 'description')
        }),
        ('Validity', {
            'fields': ('expires_at', 'max_uses', 'current_uses')
        }),
        ('Activation', {
            'fields': ('is_used', 'used_at', 'bound_device', 'activated_by')
        }),
        ('Metadata', {
            'fields': ('created_at',),
            'classes': ('collapse',)
        }),
    )

    def uses(self, obj):
        """Show uses as current/max."""
        return f"{obj.current_uses}/{obj.max_uses}"
    uses.short_description = 'Uses'

    def has_add_permission(self, request):
        # Codes are generated through the API so the format is guaranteed
        return False

    actions = ['unbind_devices']

    def unbind_devices(self, request, queryset):
        """Release selected codes from their devices."""
        codes = list(queryset.filter(is_used=True).values_list('code', flat=True))
        for code in codes:
            unbind_device(code=code)
        self.message_user(request, f"Unbound devices from {len(codes)} invite codes")
    unbind_devices.short_description = "Unbind devices"

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('created_by')

# ==========================================
# apps/accounts/admin.py
# ==========================================

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from .models import User, RoleChange


ROLE_COLORS = {
    'student': '#ccc',
    'core_member': '#6B8E5E',
    'admin': '#A47449',
}


class RoleChangeInline(admin.TabularInline):
    """Read-only role history on the user page."""
    model = RoleChange
    extra = 0
    fields = ['previous_role', 'new_role', 'upgraded_at', 'code_used']
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Custom admin interface for User model.

    Roles are read-only here; they change through invite codes or the
    role endpoint so every change lands in the role history.
    """

    list_display = [
        'email',
        'display_name',
        'campus',
        'role_badge',
        'is_active',
        'created_at',
        'last_login',
    ]

    list_filter = [
        'role',
        'is_active',
        'is_staff',
        'campus',
        'created_at',
    ]

    search_fields = [
        'email',
        'display_name',
        'campus',
    ]

    ordering = ['-created_at']
    date_hierarchy = 'created_at'

    # Remove username field references from BaseUserAdmin
    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'display_name', 'campus', 'password')
        }),
        ('Role', {
            'fields': ('role', 'invite_code_used', 'role_upgraded_at'),
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create User', {
            'classes': ('wide',),
            'fields': ('email', 'display_name', 'campus', 'password1', 'password2'),
        }),
    )

    readonly_fields = [
        'role',
        'invite_code_used',
        'role_upgraded_at',
        'created_at',
        'last_login',
    ]

    filter_horizontal = ['groups', 'user_permissions']
    inlines = [RoleChangeInline]

    def role_badge(self, obj):
        """Display role as colored badge."""
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            ROLE_COLORS.get(obj.role, '#ccc'),
            obj.get_role_display(),
        )
    role_badge.short_description = 'Role'
    role_badge.admin_order_field = 'role'

    actions = ['activate_users', 'deactivate_users']

    @admin.action(description='Activate selected users')
    def activate_users(self, request, queryset):
        """Activate selected users."""
        count = queryset.update(is_active=True)
        self.message_user(request, f'Activated {count} user(s).')

    @admin.action(description='Deactivate selected users')
    def deactivate_users(self, request, queryset):
        """Deactivate selected users (excludes superusers for safety)."""
        safe_queryset = queryset.filter(is_superuser=False)
        count = safe_queryset.update(is_active=False)
        skipped = queryset.count() - count
        msg = f'Deactivated {count} user(s).'
        if skipped:
            msg += f' Skipped {skipped} superuser(s).'
        self.message_user(request, msg)

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.prefetch_related('groups')


@admin.register(RoleChange)
class RoleChangeAdmin(admin.ModelAdmin):
    """Admin interface for the role history (read-only)."""

    list_display = ['user', 'previous_role', 'new_role', 'code_used', 'upgraded_at']
    list_filter = ['new_role', 'upgraded_at']
    search_fields = ['user__email', 'code_used']
    readonly_fields = ['user', 'previous_role', 'new_role', 'code_used', 'upgraded_at']
    date_hierarchy = 'upgraded_at'
    ordering = ['-upgraded_at']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('user')

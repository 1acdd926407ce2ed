"""
Role hierarchy and capability table.

All role checks go through ``has_capability``; callers never compare role
strings directly.
"""

from apps.accounts.models import UserRole

from .exceptions import IllegalDowngradeError, InvalidRoleError, PermissionDeniedError


ROLE_RANK = {
    UserRole.STUDENT: 0,
    UserRole.CORE_MEMBER: 1,
    UserRole.ADMIN: 2,
}


class Capability:
    CREATE_EVENTS = 'create_events'
    EDIT_ALL_EVENTS = 'edit_all_events'
    DELETE_ALL_EVENTS = 'delete_all_events'
    MANAGE_USERS = 'manage_users'
    MANAGE_INVITE_CODES = 'manage_invite_codes'
    VIEW_ANALYTICS = 'view_analytics'


CAPABILITIES = {
    UserRole.STUDENT: frozenset(),
    UserRole.CORE_MEMBER: frozenset({
        Capability.CREATE_EVENTS,
        Capability.VIEW_ANALYTICS,
    }),
    UserRole.ADMIN: frozenset({
        Capability.CREATE_EVENTS,
        Capability.EDIT_ALL_EVENTS,
        Capability.DELETE_ALL_EVENTS,
        Capability.MANAGE_USERS,
        Capability.MANAGE_INVITE_CODES,
        Capability.VIEW_ANALYTICS,
    }),
}


def role_rank(role: str) -> int:
    """
    Position of ``role`` in the hierarchy student < core_member < admin.

    Raises:
        InvalidRoleError: If role is unknown
    """
    try:
        return ROLE_RANK[role]
    except KeyError:
        raise InvalidRoleError(f"Unknown role: {role!r}")


def has_capability(role: str, capability: str) -> bool:
    """Return True if ``role`` grants ``capability``. Unknown roles grant nothing."""
    return capability in CAPABILITIES.get(role, frozenset())


def require_capability(role: str, capability: str, message: str = None) -> None:
    """
    Raise unless ``role`` grants ``capability``.

    Raises:
        PermissionDeniedError: If the capability is missing
    """
    if not has_capability(role, capability):
        raise PermissionDeniedError(
            message or f"Role '{role}' is not allowed to {capability.replace('_', ' ')}"
        )


def check_upgrade(current_role: str, target_role: str) -> None:
    """
    Validate that moving from ``current_role`` to ``target_role`` is strictly upward.

    Raises:
        IllegalDowngradeError: If target rank is equal to or below current rank
        InvalidRoleError: If either role is unknown
    """
    if role_rank(target_role) <= role_rank(current_role):
        raise IllegalDowngradeError(
            f"You already have {current_role} role or higher"
        )

"""
Role escalation service.

Moves users up the role hierarchy with invite codes, and lets admins assign
roles directly. Every change appends a RoleChange entry.
"""

import logging
from typing import Optional
from uuid import UUID

from django.db import DatabaseError, transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import RoleChange, User
from apps.invites.services.exceptions import InviteCodeAlreadyUsedError
from apps.invites.services.validation import ensure_code_usable, lock_invite_code

from .exceptions import RoleUpgradeUnavailableError, UserNotFoundError
from .role_policy import Capability, check_upgrade, require_capability, role_rank
from .session_store import SessionStore

logger = logging.getLogger(__name__)


@transaction.atomic
def _apply_upgrade(*, user_id: UUID, code: str) -> RoleChange:
    # Lock the user first, then the code; both rows stay locked until commit
    try:
        user = User.objects.select_for_update().get(pk=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User with ID {user_id} not found")

    invite = lock_invite_code(code)
    ensure_code_usable(invite)

    # Codes bound to a device are spent for upgrades too
    if invite.is_used:
        raise InviteCodeAlreadyUsedError("Invite code has already been used")

    check_upgrade(user.role, invite.role)

    invite.current_uses += 1
    invite.save(update_fields=['current_uses'])

    entry = RoleChange.objects.create(
        user=user,
        previous_role=user.role,
        new_role=invite.role,
        code_used=invite.code,
    )

    user.role = invite.role
    user.invite_code_used = invite.code
    user.role_upgraded_at = entry.upgraded_at
    user.save(update_fields=['role', 'invite_code_used', 'role_upgraded_at'])

    return entry


def upgrade_role(
    *,
    user: User,
    code: str,
    session_store: Optional[SessionStore] = None
) -> str:
    """
    Upgrade a user's role with an invite code.

    The code is validated with the same rules as activation (exists, not
    expired, not exhausted) and must grant a role strictly above the
    user's current one. Consuming a use of the code, recording the role
    history entry and changing the role happen in one transaction.

    Args:
        user: User being upgraded
        code: Invite code text
        session_store: If given and its session belongs to ``user``, the
            session role is updated after commit

    Returns:
        The new role

    Raises:
        UserNotFoundError: If the user no longer exists
        InvalidInviteCodeError: If the code is unknown
        InviteCodeExpiredError: If the code has expired
        InviteCodeExhaustedError: If the code has no uses left
        InviteCodeAlreadyUsedError: If the code is bound to a device
        IllegalDowngradeError: If the code's role is not above the user's role
        RoleUpgradeUnavailableError: If the transaction failed (retryable)
    """
    try:
        entry = _apply_upgrade(user_id=user.pk, code=code)
    except DatabaseError as e:
        logger.warning("Role upgrade of %s with code %s failed: %s", user.email, code, e)
        raise RoleUpgradeUnavailableError("Failed to upgrade role, please try again")

    user.role = entry.new_role
    user.invite_code_used = entry.code_used
    user.role_upgraded_at = entry.upgraded_at

    logger.info(
        "Role of %s upgraded from %s to %s with code %s",
        user.email, entry.previous_role, entry.new_role, entry.code_used,
    )

    if session_store is not None:
        session = session_store.load()
        if session.is_authenticated and session.user_id == str(user.pk):
            session_store.update_role(entry.new_role, history_entry={
                'previous_role': entry.previous_role,
                'new_role': entry.new_role,
                'upgrade_date': entry.upgraded_at.isoformat(),
                'code_used': entry.code_used,
            })

    return entry.new_role


@transaction.atomic
def set_user_role(*, user_id: UUID, role: str, updated_by: User) -> User:
    """
    Assign a role directly (admin user management).

    Unlike ``upgrade_role`` this may move a user down; it still records a
    RoleChange entry, with an empty ``code_used``.

    Args:
        user_id: UUID of the user whose role changes
        role: New role
        updated_by: User performing the change (must be able to manage users)

    Returns:
        Updated User instance

    Raises:
        PermissionDeniedError: If updated_by cannot manage users
        InvalidRoleError: If role is unknown
        UserNotFoundError: If the user doesn't exist
    """
    require_capability(
        updated_by.role,
        Capability.MANAGE_USERS,
        "Only administrators can change user roles",
    )
    role_rank(role)

    try:
        user = User.objects.select_for_update().get(pk=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User with ID {user_id} not found")

    if user.role == role:
        return user

    RoleChange.objects.create(
        user=user,
        previous_role=user.role,
        new_role=role,
    )
    user.role = role
    user.role_upgraded_at = timezone.now()
    user.save(update_fields=['role', 'role_upgraded_at'])

    logger.info("Role of %s set to %s by %s", user.email, role, updated_by.email)
    return user


def get_role_history(*, user: User) -> QuerySet[RoleChange]:
    """Return the user's role changes, oldest first."""
    return RoleChange.objects.filter(user=user).order_by('upgraded_at', 'id')

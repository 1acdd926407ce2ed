"""
Invite management service.

Handles invite code generation, revocation, device unbinding and listing.
"""

import logging
from datetime import timedelta
from typing import Optional

from django.conf import settings
from django.db import transaction, IntegrityError
from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.services.role_policy import Capability, require_capability, role_rank
from apps.accounts.services.session_store import SessionStore
from apps.invites.models import InviteCode

from .code_generation import make_invite_code
from .exceptions import InviteCodeNotFoundError
from .validation import normalize_code

logger = logging.getLogger(__name__)


def generate_invite_code(
    *,
    role: str,
    created_for: str,
    created_by: Optional[User] = None,
    description: str = '',
    max_uses: int = 1,
    valid_days: Optional[int] = None,
    max_retries: int = 5
) -> InviteCode:
    """
    Generate a new, unused invite code for a role.

    Args:
        role: Role granted by the code
        created_for: Who the code is meant for (free text)
        created_by: Admin generating the code; None for system/bootstrap use
        description: Optional description
        max_uses: Number of times the code can be used (default 1)
        valid_days: Validity window; defaults to settings.INVITE_CODE_VALIDITY_DAYS
        max_retries: Maximum attempts to generate a unique code

    Returns:
        Created InviteCode instance

    Raises:
        PermissionDeniedError: If created_by cannot manage invite codes
        InvalidRoleError: If role is unknown
        ValueError: If max_uses is less than 1
        RuntimeError: If cannot generate unique code after retries
    """
    if created_by is not None:
        require_capability(
            created_by.role,
            Capability.MANAGE_INVITE_CODES,
            "Only administrators can generate invite codes",
        )
    role_rank(role)
    if max_uses < 1:
        raise ValueError("max_uses must be at least 1")

    if valid_days is None:
        valid_days = settings.INVITE_CODE_VALIDITY_DAYS
    expires_at = timezone.now() + timedelta(days=valid_days)

    for attempt in range(max_retries):
        code = make_invite_code(role)

        try:
            # Each attempt is a separate transaction
            with transaction.atomic():
                invite = InviteCode.objects.create(
                    code=code,
                    role=role,
                    created_for=created_for,
                    created_by=created_by,
                    description=description,
                    expires_at=expires_at,
                    max_uses=max_uses,
                )
        except IntegrityError:
            # Code collision (very rare)
            if attempt == max_retries - 1:
                raise RuntimeError(
                    f"Failed to generate unique invite code after {max_retries} attempts"
                )
            continue

        logger.info("Generated %s invite code %s for %s", role, invite.code, created_for)
        return invite

    # Should never reach here
    raise RuntimeError("Unexpected error in invite code generation")


@transaction.atomic
def revoke_invite_code(*, code: str, revoked_by: Optional[User] = None) -> None:
    """
    Delete an invite code regardless of its state.

    A device already bound to the code loses its session on next resume.

    Raises:
        InviteCodeNotFoundError: If the code doesn't exist
        PermissionDeniedError: If revoked_by cannot manage invite codes
    """
    if revoked_by is not None:
        require_capability(
            revoked_by.role,
            Capability.MANAGE_INVITE_CODES,
            "Only administrators can revoke invite codes",
        )

    deleted, _ = InviteCode.objects.filter(code=normalize_code(code)).delete()
    if not deleted:
        raise InviteCodeNotFoundError(f"Invite code {code} not found")

    logger.info("Revoked invite code %s", code)


def unbind_device(
    *,
    code: str,
    session_store: Optional[SessionStore] = None,
    unbound_by: Optional[User] = None
) -> InviteCode:
    """
    Release an invite code from its device so it can be activated again.

    Clears the binding and activation identity and gives back the use the
    activation consumed. If ``session_store`` holds a session sourced from
    this code, that session is ended immediately; any other device finds
    out on its next ``SessionStore.resume()``.

    Raises:
        InviteCodeNotFoundError: If the code doesn't exist
        PermissionDeniedError: If unbound_by cannot manage invite codes
    """
    if unbound_by is not None:
        require_capability(
            unbound_by.role,
            Capability.MANAGE_INVITE_CODES,
            "Only administrators can unbind devices",
        )

    with transaction.atomic():
        try:
            invite = (
                InviteCode.objects
                .select_for_update()
                .get(code=normalize_code(code))
            )
        except InviteCode.DoesNotExist:
            raise InviteCodeNotFoundError(f"Invite code {code} not found")

        if invite.is_used:
            invite.current_uses = max(0, invite.current_uses - 1)
        invite.is_used = False
        invite.used_at = None
        invite.bound_device = None
        invite.activated_by = None
        invite.save(update_fields=[
            'is_used', 'used_at', 'bound_device', 'activated_by', 'current_uses',
        ])

    logger.info("Unbound device from invite code %s", invite.code)

    if session_store is not None:
        session = session_store.load()
        if session.is_authenticated and session.source_invite_code == invite.code:
            session_store.end()

    return invite


def list_invite_codes() -> QuerySet[InviteCode]:
    return InviteCode.objects.select_related('created_by').all()


def get_codes_by_role(role: str) -> QuerySet[InviteCode]:
    return list_invite_codes().filter(role=role)


def get_unused_codes() -> QuerySet[InviteCode]:
    """Codes that can still be activated: unused and not expired."""
    return list_invite_codes().filter(is_used=False, expires_at__gt=timezone.now())


def get_used_codes() -> QuerySet[InviteCode]:
    return list_invite_codes().filter(is_used=True)

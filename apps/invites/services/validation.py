"""
Invite code validation rules.

Shared by activation and role upgrade. Kept free of accounts imports so
both apps can depend on it.
"""

from apps.invites.models import InviteCode

from .exceptions import (
    InvalidInviteCodeError,
    InviteCodeExpiredError,
    InviteCodeExhaustedError,
)


def normalize_code(code: str) -> str:
    """Codes are stored uppercase; tolerate surrounding whitespace and case."""
    return (code or '').strip().upper()


def lock_invite_code(code: str) -> InviteCode:
    """
    Fetch an invite code with a row lock. Must run inside a transaction.

    Raises:
        InvalidInviteCodeError: If the code doesn't exist
    """
    try:
        return (
            InviteCode.objects
            .select_for_update()
            .get(code=normalize_code(code))
        )
    except InviteCode.DoesNotExist:
        raise InvalidInviteCodeError("Invalid invite code")


def ensure_code_usable(invite: InviteCode) -> None:
    """
    Check expiry and remaining uses.

    Raises:
        InviteCodeExpiredError: If now > expires_at
        InviteCodeExhaustedError: If current_uses >= max_uses
    """
    if invite.is_expired:
        raise InviteCodeExpiredError("Invite code has expired")

    if invite.is_exhausted:
        raise InviteCodeExhaustedError("Invite code has reached maximum usage limit")


def validate_invite_code(*, code: str) -> InviteCode:
    """
    Resolve and validate an invite code without modifying it.

    Raises:
        InvalidInviteCodeError: If the code doesn't exist
        InviteCodeExpiredError: If the code has expired
        InviteCodeExhaustedError: If the code has no uses left
    """
    try:
        invite = InviteCode.objects.get(code=normalize_code(code))
    except InviteCode.DoesNotExist:
        raise InvalidInviteCodeError("Invalid invite code")

    ensure_code_usable(invite)
    return invite

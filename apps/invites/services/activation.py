"""
Invite code activation.

Activation marks a code used and binds it to the activating device in one
transaction on the code row, then replaces this installation's session
with one carrying the code's role.
"""

import logging

from django.db import DatabaseError, transaction
from django.utils import timezone

from apps.accounts.services.session_store import SessionStore, UserSession
from apps.devices.fingerprint import DeviceFingerprint
from apps.invites.models import InviteCode

from .exceptions import ActivationUnavailableError, InviteCodeAlreadyUsedError
from .validation import ensure_code_usable, lock_invite_code

logger = logging.getLogger(__name__)


def _user_info_snapshot(user_info: dict) -> dict:
    snapshot = {
        'name': user_info.get('name', ''),
        'campus': user_info.get('campus', ''),
    }
    if user_info.get('email'):
        snapshot['email'] = user_info['email']
    return snapshot


def bind_invite_code(
    *,
    code: str,
    user_info: dict,
    device: DeviceFingerprint
) -> InviteCode:
    """
    Mark an invite code used and bind it to a device.

    The code row is locked for the whole check-then-write, so two
    concurrent activations of the same code resolve to one success and
    one InviteCodeAlreadyUsedError.

    Args:
        code: Invite code text
        user_info: Activating user's ``{name, campus, email?}``
        device: Fingerprint of the activating device

    Returns:
        Updated InviteCode instance

    Raises:
        InvalidInviteCodeError: If the code doesn't exist
        InviteCodeAlreadyUsedError: If the code is already bound
        InviteCodeExpiredError: If the code has expired
        InviteCodeExhaustedError: If the code has no uses left
        ActivationUnavailableError: If the transaction failed (retryable)
    """
    try:
        with transaction.atomic():
            invite = lock_invite_code(code)

            if invite.is_used:
                raise InviteCodeAlreadyUsedError("Invite code has already been used")

            ensure_code_usable(invite)

            invite.is_used = True
            invite.used_at = timezone.now()
            invite.bound_device = device.to_dict()
            invite.activated_by = _user_info_snapshot(user_info)
            invite.current_uses += 1
            invite.save(update_fields=[
                'is_used', 'used_at', 'bound_device', 'activated_by', 'current_uses',
            ])
    except DatabaseError as e:
        logger.warning("Activation of invite code %s failed: %s", code, e)
        raise ActivationUnavailableError("Failed to activate invite code, please try again")

    logger.info(
        "Invite code %s activated by %s on device %s",
        invite.code, invite.activated_by.get('name'), device.device_id,
    )
    return invite


def activate_invite_code(
    *,
    code: str,
    user_info: dict,
    session_store: SessionStore
) -> UserSession:
    """
    Activate an invite code on this installation.

    Args:
        code: Invite code text
        user_info: Activating user's ``{name, campus, email?}``
        session_store: This installation's session store

    Returns:
        The new active UserSession, with the code's role

    Raises:
        InvalidInviteCodeError, InviteCodeAlreadyUsedError,
        InviteCodeExpiredError, InviteCodeExhaustedError,
        ActivationUnavailableError: see bind_invite_code
    """
    device = session_store.fingerprints.current()
    invite = bind_invite_code(code=code, user_info=user_info, device=device)

    return session_store.start(
        identity=invite.activated_by,
        role=invite.role,
        device=device,
        source_invite_code=invite.code,
    )

"""
Session store.

Persists the single "current user" session of this installation in the
local store. One SessionStore is built by the composition root
(``get_session_store``) and handed to every consumer; nothing reads the
session through a global.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from django.utils import timezone

from apps.accounts.models import UserRole
from apps.devices.fingerprint import DeviceFingerprint, DeviceFingerprintService
from apps.devices.storage import CURRENT_SESSION_STORAGE_KEY, LocalStore

from .exceptions import DeviceMismatchError

logger = logging.getLogger(__name__)


@dataclass
class UserSession:
    """The active session of this installation."""

    is_authenticated: bool = False
    identity: Optional[dict] = None
    role: str = UserRole.STUDENT
    bound_device: Optional[DeviceFingerprint] = None
    source_invite_code: Optional[str] = None
    authenticated_at: Optional[datetime] = None
    user_id: Optional[str] = None
    role_history: list = field(default_factory=list)

    @classmethod
    def anonymous(cls) -> 'UserSession':
        return cls()

    def to_dict(self) -> dict:
        return {
            'is_authenticated': self.is_authenticated,
            'identity': self.identity,
            'role': str(self.role),
            'bound_device': self.bound_device.to_dict() if self.bound_device else None,
            'source_invite_code': self.source_invite_code,
            'authenticated_at': (
                self.authenticated_at.isoformat() if self.authenticated_at else None
            ),
            'user_id': self.user_id,
            'role_history': list(self.role_history),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'UserSession':
        authenticated_at = data.get('authenticated_at')
        return cls(
            is_authenticated=data.get('is_authenticated', False),
            identity=data.get('identity'),
            role=data.get('role', UserRole.STUDENT),
            bound_device=DeviceFingerprint.from_dict(data.get('bound_device')),
            source_invite_code=data.get('source_invite_code'),
            authenticated_at=(
                datetime.fromisoformat(authenticated_at) if authenticated_at else None
            ),
            user_id=data.get('user_id'),
            role_history=list(data.get('role_history') or []),
        )


class SessionStore:
    """
    Owner of the installation's single UserSession.

    Args:
        store: LocalStore the session is persisted in
        fingerprints: Fingerprint service used to bind and verify the device
    """

    def __init__(self, store: LocalStore, fingerprints: DeviceFingerprintService):
        self.store = store
        self.fingerprints = fingerprints

    def load(self) -> UserSession:
        """Return the persisted session, or the anonymous session."""
        data = self.store.get(CURRENT_SESSION_STORAGE_KEY)
        if not data:
            return UserSession.anonymous()
        return UserSession.from_dict(data)

    @property
    def current(self) -> UserSession:
        return self.load()

    def _save(self, session: UserSession) -> UserSession:
        self.store.set(CURRENT_SESSION_STORAGE_KEY, session.to_dict())
        return session

    def start(
        self,
        *,
        identity: dict,
        role: str,
        device: DeviceFingerprint,
        source_invite_code: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> UserSession:
        """Create or replace the active session."""
        session = UserSession(
            is_authenticated=True,
            identity=identity,
            role=role,
            bound_device=device,
            source_invite_code=source_invite_code,
            authenticated_at=timezone.now(),
            user_id=str(user_id) if user_id else None,
        )
        logger.info(
            "Session started for %s as %s (device %s)",
            identity.get('name') if identity else None, role, device.device_id,
        )
        return self._save(session)

    def start_for_user(self, user) -> UserSession:
        """Start a session after identity-provider sign-in."""
        return self.start(
            identity=user.identity(),
            role=user.role,
            device=self.fingerprints.current(),
            user_id=user.id,
        )

    def update_role(self, role: str, history_entry: Optional[dict] = None) -> UserSession:
        """Commit a new role to the active session. Called by the escalation policy only."""
        session = self.load()
        if not session.is_authenticated:
            return session
        session.role = role
        if history_entry is not None:
            session.role_history.append(history_entry)
        return self._save(session)

    def end(self) -> UserSession:
        """Log out: replace the session with the anonymous one."""
        session = self.load()
        if session.is_authenticated:
            logger.info("Session ended (source code %s)", session.source_invite_code)
        return self._save(UserSession.anonymous())

    def resume(self) -> UserSession:
        """
        Re-validate the session when the app resumes.

        Returns:
            The (still valid) current session

        Raises:
            DeviceMismatchError: If the bound device differs from this device,
                or the source invite code was revoked or unbound. The session
                is ended before raising.
        """
        session = self.load()
        if not session.is_authenticated or session.bound_device is None:
            return session

        if not self.fingerprints.verify(session.bound_device):
            self.end()
            raise DeviceMismatchError(
                "Device verification failed. Please contact administrator."
            )

        if session.source_invite_code and not self._code_still_bound(session):
            self.end()
            raise DeviceMismatchError(
                "This device is no longer bound to your invite code. Please sign in again."
            )

        return session

    def _code_still_bound(self, session: UserSession) -> bool:
        from apps.invites.models import InviteCode

        code = (
            InviteCode.objects
            .filter(code=session.source_invite_code)
            .only('is_used', 'bound_device')
            .first()
        )
        if code is None or not code.is_used:
            return False
        bound = DeviceFingerprint.from_dict(code.bound_device)
        return bound is not None and bound.matches(session.bound_device)


def get_session_store() -> SessionStore:
    """Composition root for the installation's session store."""
    store = LocalStore()
    return SessionStore(store, DeviceFingerprintService(store))

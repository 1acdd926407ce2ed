"""
Device fingerprint service.

Derives a best-effort stable identifier for the current installation.
The identifier is generated once and persisted in the local store, so it
is stable per install, not per hardware unit: reinstalling the app yields
a new identity. It is a logical label used to deter sharing of invite
codes across devices, not a security boundary.
"""

import logging
import platform
import secrets
import string
import time
from dataclasses import asdict, dataclass
from typing import Optional

from django.conf import settings

from .storage import DEVICE_ID_STORAGE_KEY, LocalStore

logger = logging.getLogger(__name__)

_ID_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


@dataclass(frozen=True)
class DeviceFingerprint:
    """Identity label for one app installation."""

    device_id: str
    brand: str
    model: str
    os_version: str
    app_id: str
    install_time: int = 0

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional['DeviceFingerprint']:
        if not data:
            return None
        return cls(
            device_id=data['device_id'],
            brand=data.get('brand', 'Unknown'),
            model=data.get('model', 'Unknown'),
            os_version=data.get('os_version', 'Unknown'),
            app_id=data['app_id'],
            install_time=data.get('install_time', 0),
        )

    def matches(self, other: 'DeviceFingerprint') -> bool:
        """Only device_id and app_id are binding; the rest is live metadata."""
        return self.device_id == other.device_id and self.app_id == other.app_id


def generate_device_id() -> str:
    """Return a fresh id of the form ``device_<epoch-ms>_<9 chars>``."""
    suffix = ''.join(secrets.choice(_ID_SUFFIX_ALPHABET) for _ in range(9))
    return f"device_{int(time.time() * 1000)}_{suffix}"


class DeviceFingerprintService:
    """
    Computes and verifies fingerprints for this installation.

    Args:
        store: LocalStore holding the persisted device id
        app_id: Application identifier (defaults to settings.APP_ID)
    """

    def __init__(self, store: LocalStore, app_id: Optional[str] = None):
        self.store = store
        self.app_id = app_id or settings.APP_ID

    def device_id(self) -> str:
        """Return the persisted device id, generating it on first use."""
        device_id = self.store.get(DEVICE_ID_STORAGE_KEY)
        if not device_id:
            device_id = generate_device_id()
            self.store.set(DEVICE_ID_STORAGE_KEY, device_id)
            logger.info("Generated new device id %s", device_id)
        return device_id

    def current(self) -> DeviceFingerprint:
        """Persisted device id plus live hardware/OS metadata."""
        return DeviceFingerprint(
            device_id=self.device_id(),
            brand=platform.system() or 'Unknown',
            model=platform.machine() or 'Unknown',
            os_version=platform.release() or 'Unknown',
            app_id=self.app_id,
            install_time=int(time.time() * 1000),
        )

    def verify(self, bound: DeviceFingerprint) -> bool:
        """
        Check that ``bound`` describes this installation.

        A False result is fatal for the session holding ``bound``; callers
        must tear the session down rather than warn.
        """
        current = self.current()
        if current.matches(bound):
            return True
        logger.warning(
            "Device fingerprint mismatch: bound=%s/%s current=%s/%s",
            bound.device_id, bound.app_id, current.device_id, current.app_id,
        )
        return False

    def forget(self) -> None:
        """Drop the persisted device id, as a reinstall would."""
        self.store.delete(DEVICE_ID_STORAGE_KEY)

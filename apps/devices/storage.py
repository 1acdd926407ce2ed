"""
Local durable key-value store.

Thin wrapper over a Django cache alias configured with no expiry. Holds the
per-installation records: the current user session and the device id.
"""

from django.conf import settings
from django.core.cache import caches

CURRENT_SESSION_STORAGE_KEY = 'current_user_session'
DEVICE_ID_STORAGE_KEY = 'unique_device_id'


class LocalStore:
    """Persistent key-value store backed by ``settings.LOCAL_STORE_ALIAS``."""

    def __init__(self, alias=None):
        self.alias = alias or settings.LOCAL_STORE_ALIAS

    @property
    def backend(self):
        return caches[self.alias]

    def get(self, key, default=None):
        return self.backend.get(key, default)

    def set(self, key, value):
        # timeout=None: entries live until explicitly deleted
        self.backend.set(key, value, timeout=None)

    def delete(self, key):
        self.backend.delete(key)

    def clear(self):
        self.backend.clear()

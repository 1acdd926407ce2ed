import pytest
from apps.devices.fingerprint import DeviceFingerprintService
from apps.devices.storage import LocalStore


@pytest.fixture(autouse=True)
def local_store():
    """Return an empty local store; cleared again after the test."""
    store = LocalStore()
    store.clear()
    yield store
    store.clear()


@pytest.fixture
def fingerprints(local_store):
    """Fingerprint service for this installation."""
    return DeviceFingerprintService(local_store, app_id='coc-app')

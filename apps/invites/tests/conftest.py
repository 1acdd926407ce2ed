import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole
from apps.accounts.services import SessionStore
from apps.devices.fingerprint import DeviceFingerprint, DeviceFingerprintService
from apps.devices.storage import LocalStore
from apps.invites.services import generate_invite_code


USER_INFO = {'name': 'Grace', 'campus': 'North Campus'}


@pytest.fixture(autouse=True)
def local_store():
    """Return an empty local store; cleared again after the test."""
    store = LocalStore()
    store.clear()
    yield store
    store.clear()


@pytest.fixture
def session_store(local_store):
    """Return this installation's session store."""
    return SessionStore(local_store, DeviceFingerprintService(local_store))


@pytest.fixture
def user_info():
    return dict(USER_INFO)


@pytest.fixture
def device():
    """Fingerprint of some other installation."""
    return DeviceFingerprint(
        device_id='device_1700000000000_abcdefghi',
        brand='Android',
        model='Pixel 8',
        os_version='14',
        app_id='coc-app',
        install_time=1700000000000,
    )


@pytest.fixture
def other_device():
    return DeviceFingerprint(
        device_id='device_1700000000001_zyxwvutsr',
        brand='iOS',
        model='iPhone',
        os_version='17',
        app_id='coc-app',
    )


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def admin_user(db):
    """Create and return an admin."""
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        display_name='Admin',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def core_member(db):
    """Create and return a core member."""
    return User.objects.create_user(
        email='core@example.com',
        password='TestPass123!',
        display_name='Core Member',
        role=UserRole.CORE_MEMBER,
    )


@pytest.fixture
def admin_client(admin_user):
    """Return an API client authenticated as the admin."""
    client = APIClient()
    refresh = RefreshToken.for_user(admin_user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def core_member_client(core_member):
    """Return an API client authenticated as a core member."""
    client = APIClient()
    refresh = RefreshToken.for_user(core_member)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def student_code(db, admin_user):
    """Single-use code granting student."""
    return generate_invite_code(
        role=UserRole.STUDENT,
        created_for='Grace',
        created_by=admin_user,
    )


@pytest.fixture
def core_member_code(db, admin_user):
    """Single-use code granting core_member."""
    return generate_invite_code(
        role=UserRole.CORE_MEMBER,
        created_for='Worship team',
        created_by=admin_user,
    )

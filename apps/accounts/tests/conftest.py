import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole
from apps.accounts.services import SessionStore
from apps.devices.fingerprint import DeviceFingerprintService
from apps.devices.storage import LocalStore
from apps.invites.services import generate_invite_code


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
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a student."""
    return User.objects.create_user(
        email='testuser@example.com',
        password='TestPass123!',
        display_name='Test User',
        campus='North Campus',
    )


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive user."""
    return User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        display_name='Inactive User',
        is_active=False,
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
def admin_user(db):
    """Create and return an admin."""
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        display_name='Admin',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an API client authenticated as the student using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def admin_client(admin_user):
    """Return an API client authenticated as the admin."""
    client = APIClient()
    refresh = RefreshToken.for_user(admin_user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def core_member_code(db):
    """Single-use code granting core_member."""
    return generate_invite_code(role=UserRole.CORE_MEMBER, created_for='Test User')


@pytest.fixture
def admin_code(db):
    """Single-use code granting admin."""
    return generate_invite_code(role=UserRole.ADMIN, created_for='Test User')


@pytest.fixture
def student_code(db):
    """Single-use code granting student."""
    return generate_invite_code(role=UserRole.STUDENT, created_for='Test User')

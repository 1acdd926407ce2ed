import pytest
from datetime import timedelta
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole
from apps.events.models import Event, EventCategory


def client_for(user):
    """Return an API client authenticated as ``user`` using JWT."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def organizer(db):
    """Core member who organises events."""
    return User.objects.create_user(
        email='organizer@example.com',
        password='TestPass123!',
        display_name='Organizer',
        role=UserRole.CORE_MEMBER,
    )


@pytest.fixture
def other_core_member(db):
    return User.objects.create_user(
        email='core2@example.com',
        password='TestPass123!',
        display_name='Other Core',
        role=UserRole.CORE_MEMBER,
    )


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        display_name='Admin',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def student_a(db):
    return User.objects.create_user(email='a@example.com', password='TestPass123!', display_name='A')


@pytest.fixture
def student_b(db):
    return User.objects.create_user(email='b@example.com', password='TestPass123!', display_name='B')


@pytest.fixture
def student_c(db):
    return User.objects.create_user(email='c@example.com', password='TestPass123!', display_name='C')


@pytest.fixture
def event(organizer):
    """Upcoming event with one seat."""
    return Event.objects.create(
        title='Friday Worship',
        description='Worship night',
        date=timezone.localdate() + timedelta(days=3),
        location='Chapel',
        organizer='Organizer',
        organizer_user=organizer,
        category=EventCategory.WORSHIP,
        max_attendees=1,
    )


@pytest.fixture
def open_event(organizer):
    """Upcoming event without a capacity limit."""
    return Event.objects.create(
        title='Prayer Meeting',
        date=timezone.localdate() + timedelta(days=10),
        organizer='Organizer',
        organizer_user=organizer,
        category=EventCategory.PRAYER,
    )


@pytest.fixture
def organizer_client(organizer):
    return client_for(organizer)


@pytest.fixture
def admin_client(admin_user):
    return client_for(admin_user)


@pytest.fixture
def student_client(student_a):
    return client_for(student_a)


@pytest.fixture
def student_b_client(student_b):
    return client_for(student_b)


@pytest.fixture
def other_core_client(other_core_member):
    return client_for(other_core_member)

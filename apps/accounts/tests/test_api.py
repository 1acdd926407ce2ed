import pytest
from uuid import uuid4
from unittest.mock import patch
from django.db import OperationalError
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole
from apps.invites.services import generate_invite_code


@pytest.mark.django_db
class TestRegistration:
    """Tests for user registration endpoint."""

    def test_register_success(self, api_client):
        """Test successful user registration."""
        data = {
            'email': 'newuser@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
            'display_name': 'New User',
            'campus': 'North Campus',
        }
        response = api_client.post(reverse('users:register'), data)

        assert response.status_code == status.HTTP_201_CREATED
        assert 'tokens' in response.data
        assert 'access' in response.data['tokens']
        assert 'refresh' in response.data['tokens']
        assert response.data['user']['email'] == 'newuser@example.com'
        assert response.data['user']['role'] == UserRole.STUDENT
        assert User.objects.filter(email='newuser@example.com').exists()

    def test_register_password_mismatch(self, api_client):
        """Test registration fails when passwords don't match."""
        data = {
            'email': 'newuser@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'DifferentPass123!',
        }
        response = api_client.post(reverse('users:register'), data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password_confirm' in response.data

    def test_register_duplicate_email(self, api_client, user):
        """Test registration fails with existing email."""
        data = {
            'email': user.email,
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(reverse('users:register'), data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_register_cannot_choose_role(self, api_client):
        """Role in the payload is ignored; everyone starts as student."""
        data = {
            'email': 'sneaky@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
            'role': 'admin',
        }
        response = api_client.post(reverse('users:register'), data)

        assert response.status_code == status.HTTP_201_CREATED
        assert User.objects.get(email='sneaky@example.com').role == UserRole.STUDENT


@pytest.mark.django_db
class TestLogin:
    """Tests for login endpoint."""

    def test_login_success(self, api_client, user):
        """Test successful login."""
        data = {'email': user.email, 'password': 'TestPass123!'}
        response = api_client.post(reverse('users:login'), data)

        assert response.status_code == status.HTTP_200_OK
        assert 'tokens' in response.data
        assert response.data['user']['email'] == user.email

    def test_login_invalid_password(self, api_client, user):
        """Test login fails with wrong password."""
        data = {'email': user.email, 'password': 'WrongPassword!'}
        response = api_client.post(reverse('users:login'), data)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert 'error' in response.data

    def test_login_inactive_user(self, api_client, user_inactive):
        """Test login fails for inactive user."""
        data = {'email': user_inactive.email, 'password': 'TestPass123!'}
        response = api_client.post(reverse('users:login'), data)

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestCurrentUser:

    def test_get_current_user(self, authenticated_client, user):
        response = authenticated_client.get(reverse('users:current-user'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == user.email
        assert response.data['role'] == UserRole.STUDENT

    def test_requires_authentication(self, api_client):
        response = api_client.get(reverse('users:current-user'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestUpgradeRole:
    """Tests for role upgrade endpoint."""

    def test_upgrade_success(self, authenticated_client, user, core_member_code):
        response = authenticated_client.post(reverse('users:upgrade-role'), {'invite_code': core_member_code.code})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['role'] == UserRole.CORE_MEMBER
        user.refresh_from_db()
        assert user.role == UserRole.CORE_MEMBER

    def test_upgrade_same_role(self, core_member, api_client):
        code = generate_invite_code(role=UserRole.CORE_MEMBER, created_for='Core Member')
        api_client.credentials(
            HTTP_AUTHORIZATION=f'Bearer {RefreshToken.for_user(core_member).access_token}'
        )

        response = api_client.post(reverse('users:upgrade-role'), {'invite_code': code.code})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'or higher' in response.data['error']

    def test_upgrade_invalid_code(self, authenticated_client):
        response = authenticated_client.post(reverse('users:upgrade-role'), {'invite_code': 'NOPE'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_upgrade_exhausted_code(self, authenticated_client, core_member_code):
        authenticated_client.post(reverse('users:upgrade-role'), {'invite_code': core_member_code.code})
        other = User.objects.create_user(email='other@example.com', password='TestPass123!')
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {RefreshToken.for_user(other).access_token}')

        response = client.post(reverse('users:upgrade-role'), {'invite_code': core_member_code.code})

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_upgrade_store_failure(self, authenticated_client, user, core_member_code):
        with patch(
            'apps.accounts.services.role_escalation.lock_invite_code',
            side_effect=OperationalError('database is locked'),
        ):
            response = authenticated_client.post(
                reverse('users:upgrade-role'), {'invite_code': core_member_code.code}
            )

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        user.refresh_from_db()
        assert user.role == UserRole.STUDENT

    def test_role_history(self, authenticated_client, core_member_code, admin_code):
        authenticated_client.post(reverse('users:upgrade-role'), {'invite_code': core_member_code.code})
        authenticated_client.post(reverse('users:upgrade-role'), {'invite_code': admin_code.code})

        response = authenticated_client.get(reverse('users:role-history'))

        assert response.status_code == status.HTTP_200_OK
        assert [entry['new_role'] for entry in response.data] == ['core_member', 'admin']
        assert response.data[0]['previous_role'] == 'student'


@pytest.mark.django_db
class TestSetRole:

    def test_admin_sets_role(self, admin_client, user):
        url = reverse('users:set-role', kwargs={'pk': user.id})

        response = admin_client.post(url, {'role': 'core_member'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['role'] == 'core_member'

    def test_student_cannot_set_role(self, authenticated_client, user):
        url = reverse('users:set-role', kwargs={'pk': user.id})

        response = authenticated_client.post(url, {'role': 'admin'})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        user.refresh_from_db()
        assert user.role == UserRole.STUDENT

    def test_unknown_user(self, admin_client):
        url = reverse('users:set-role', kwargs={'pk': uuid4()})

        response = admin_client.post(url, {'role': 'admin'})

        assert response.status_code == status.HTTP_404_NOT_FOUND

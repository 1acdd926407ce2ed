"""User registration service."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from .exceptions import UserRegistrationError

User = get_user_model()

logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    display_name: str = "",
    campus: str = ""
) -> User:
    """
    Register a new identity-provider account.

    New accounts always start as students; higher roles are only reached
    through invite codes or an admin.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        display_name: Optional display name
        campus: Optional campus name

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email is taken or registration fails
    """
    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            display_name=display_name,
            campus=campus,
        )
    except IntegrityError:
        raise UserRegistrationError("A user with this email already exists")
    except ValueError as e:
        raise UserRegistrationError(f"Registration failed: {str(e)}")

    logger.info("Registered user %s", user.email)
    return user

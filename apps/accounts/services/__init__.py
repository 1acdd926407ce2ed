"""
Accounts app services layer.

Identity-provider accounts, the role hierarchy and its escalation, and the
per-installation session store.
"""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    UserNotFoundError,
    PermissionDeniedError,
    IllegalDowngradeError,
    InvalidRoleError,
    DeviceMismatchError,
    RoleUpgradeUnavailableError,
)
from .role_policy import (
    Capability,
    ROLE_RANK,
    role_rank,
    has_capability,
    require_capability,
    check_upgrade,
)
from .session_store import (
    SessionStore,
    UserSession,
    get_session_store,
)
from .user_registration import register_user
from .user_authentication import authenticate_user, sign_in, sign_out
from .role_escalation import upgrade_role, set_user_role, get_role_history

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'UserNotFoundError',
    'PermissionDeniedError',
    'IllegalDowngradeError',
    'InvalidRoleError',
    'DeviceMismatchError',
    'RoleUpgradeUnavailableError',
    # Role policy
    'Capability',
    'ROLE_RANK',
    'role_rank',
    'has_capability',
    'require_capability',
    'check_upgrade',
    # Sessions
    'SessionStore',
    'UserSession',
    'get_session_store',
    # Services
    'register_user',
    'authenticate_user',
    'sign_in',
    'sign_out',
    'upgrade_role',
    'set_user_role',
    'get_role_history',
]

"""
Invites app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations on a code run in a transaction with the
code row locked.
"""

from .exceptions import (
    InvitesServiceError,
    InvalidInviteCodeError,
    InviteCodeExpiredError,
    InviteCodeAlreadyUsedError,
    InviteCodeExhaustedError,
    InviteCodeNotFoundError,
    ActivationUnavailableError,
)

from .validation import (
    validate_invite_code,
)

from .code_generation import (
    make_invite_code,
    role_for_code,
)

from .invite_management import (
    generate_invite_code,
    revoke_invite_code,
    unbind_device,
    list_invite_codes,
    get_codes_by_role,
    get_unused_codes,
    get_used_codes,
)

from .activation import (
    bind_invite_code,
    activate_invite_code,
)


__all__ = [
    # Exceptions
    'InvitesServiceError',
    'InvalidInviteCodeError',
    'InviteCodeExpiredError',
    'InviteCodeAlreadyUsedError',
    'InviteCodeExhaustedError',
    'InviteCodeNotFoundError',
    'ActivationUnavailableError',

    # Validation
    'validate_invite_code',

    # Code format
    'make_invite_code',
    'role_for_code',

    # Management
    'generate_invite_code',
    'revoke_invite_code',
    'unbind_device',
    'list_invite_codes',
    'get_codes_by_role',
    'get_unused_codes',
    'get_used_codes',

    # Activation
    'bind_invite_code',
    'activate_invite_code',
]

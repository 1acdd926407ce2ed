"""
Domain-specific exceptions for invites app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class InvitesServiceError(Exception):
    """Base exception for all invites service errors."""
    pass


class InvalidInviteCodeError(InvitesServiceError):
    """Raised when an invite code does not exist."""
    pass


class InviteCodeExpiredError(InvitesServiceError):
    """Raised when an invite code is past its expiry date."""
    pass


class InviteCodeAlreadyUsedError(InvitesServiceError):
    """Raised when an invite code is already bound to a device."""
    pass


class InviteCodeExhaustedError(InvitesServiceError):
    """Raised when a multi-use invite code has no uses left."""
    pass


class InviteCodeNotFoundError(InvitesServiceError):
    """Raised when revoking or unbinding a code that does not exist."""
    pass


class ActivationUnavailableError(InvitesServiceError):
    """
    Raised when the store could not complete an activation transaction.

    Retryable: nothing was written. The core does not retry on its own.
    """
    pass

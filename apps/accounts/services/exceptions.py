"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class UserRegistrationError(AccountsServiceError):
    """Raised when user registration fails."""
    pass


class InvalidCredentialsError(AccountsServiceError):
    """Raised when authentication credentials are invalid."""
    pass


class InactiveAccountError(AccountsServiceError):
    """Raised when account is deactivated."""
    pass


class UserNotFoundError(AccountsServiceError):
    """Raised when user does not exist."""
    pass


class PermissionDeniedError(AccountsServiceError):
    """Raised when a role lacks the capability an operation requires."""
    pass


class IllegalDowngradeError(AccountsServiceError):
    """Raised when a role change would not move the user strictly upward."""
    pass


class InvalidRoleError(AccountsServiceError):
    """Raised when a role name is not part of the hierarchy."""
    pass


class DeviceMismatchError(AccountsServiceError):
    """
    Raised when the session's bound device no longer matches this device.

    The session has already been torn down when this is raised.
    """
    pass


class RoleUpgradeUnavailableError(AccountsServiceError):
    """
    Raised when the store could not complete a role upgrade transaction.

    Retryable: nothing was written. The core does not retry on its own.
    """
    pass

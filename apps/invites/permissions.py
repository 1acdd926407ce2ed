from rest_framework import permissions

from apps.accounts.services.role_policy import Capability, has_capability


class CanManageInviteCodes(permissions.BasePermission):
    """
    Permission: User's role must grant invite code management (admins).
    """

    message = "Only administrators can manage invite codes"

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user and user.is_authenticated
            and has_capability(user.role, Capability.MANAGE_INVITE_CODES)
        )

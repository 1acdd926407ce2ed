"""Tests for the role hierarchy and capability table."""

import pytest

from apps.accounts.models import UserRole
from apps.accounts.services import (
    Capability,
    role_rank,
    has_capability,
    require_capability,
    check_upgrade,
    IllegalDowngradeError,
    InvalidRoleError,
    PermissionDeniedError,
)


class TestRoleRank:

    def test_hierarchy_order(self):
        assert role_rank(UserRole.STUDENT) < role_rank(UserRole.CORE_MEMBER) < role_rank(UserRole.ADMIN)

    def test_plain_strings_accepted(self):
        assert role_rank('core_member') == 1

    def test_unknown_role_raises(self):
        with pytest.raises(InvalidRoleError):
            role_rank('pastor')


class TestCapabilities:

    @pytest.mark.parametrize('capability', [
        Capability.CREATE_EVENTS,
        Capability.EDIT_ALL_EVENTS,
        Capability.DELETE_ALL_EVENTS,
        Capability.MANAGE_USERS,
        Capability.MANAGE_INVITE_CODES,
        Capability.VIEW_ANALYTICS,
    ])
    def test_student_has_nothing(self, capability):
        assert not has_capability(UserRole.STUDENT, capability)

    def test_core_member(self):
        assert has_capability(UserRole.CORE_MEMBER, Capability.CREATE_EVENTS)
        assert has_capability(UserRole.CORE_MEMBER, Capability.VIEW_ANALYTICS)
        assert not has_capability(UserRole.CORE_MEMBER, Capability.EDIT_ALL_EVENTS)
        assert not has_capability(UserRole.CORE_MEMBER, Capability.MANAGE_INVITE_CODES)

    def test_admin_has_everything(self):
        for capability in (
            Capability.CREATE_EVENTS,
            Capability.EDIT_ALL_EVENTS,
            Capability.DELETE_ALL_EVENTS,
            Capability.MANAGE_USERS,
            Capability.MANAGE_INVITE_CODES,
            Capability.VIEW_ANALYTICS,
        ):
            assert has_capability(UserRole.ADMIN, capability)

    def test_unknown_role_has_nothing(self):
        assert not has_capability('guest', Capability.CREATE_EVENTS)

    def test_require_capability_raises(self):
        with pytest.raises(PermissionDeniedError, match="create events"):
            require_capability(UserRole.STUDENT, Capability.CREATE_EVENTS)

    def test_require_capability_custom_message(self):
        with pytest.raises(PermissionDeniedError, match="Admins only"):
            require_capability(UserRole.CORE_MEMBER, Capability.MANAGE_USERS, "Admins only")


class TestCheckUpgrade:

    def test_upward_moves_allowed(self):
        check_upgrade(UserRole.STUDENT, UserRole.CORE_MEMBER)
        check_upgrade(UserRole.STUDENT, UserRole.ADMIN)
        check_upgrade(UserRole.CORE_MEMBER, UserRole.ADMIN)

    @pytest.mark.parametrize('current,target', [
        (UserRole.STUDENT, UserRole.STUDENT),
        (UserRole.CORE_MEMBER, UserRole.CORE_MEMBER),
        (UserRole.CORE_MEMBER, UserRole.STUDENT),
        (UserRole.ADMIN, UserRole.CORE_MEMBER),
        (UserRole.ADMIN, UserRole.ADMIN),
    ])
    def test_same_or_lower_rejected(self, current, target):
        with pytest.raises(IllegalDowngradeError, match="or higher"):
            check_upgrade(current, target)

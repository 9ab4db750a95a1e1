"""
Tests for role capabilities and permission classes
"""

from unittest.mock import Mock

from django.contrib.auth.models import AnonymousUser
from django.test import SimpleTestCase

from senexus_core.accounts.models import User
from senexus_core.accounts.permissions import (
    IsPlatformAdmin,
    RoleBasedPermission,
    UserPermissions,
)


def request_for(role=None):
    if role is None:
        return Mock(user=AnonymousUser())
    return Mock(user=Mock(is_authenticated=True, role=role))


class UserPermissionsTestCase(SimpleTestCase):

    def test_admin_and_owner(self):
        for role in (User.Role.ADMIN, User.Role.OWNER):
            caps = UserPermissions.for_role(role)
            self.assertTrue(caps.can_create_users)
            self.assertTrue(caps.can_create_firms)
            self.assertTrue(caps.can_manage_firm_assignments)
            self.assertTrue(caps.can_view_all_users)

    def test_manager(self):
        caps = UserPermissions.for_role(User.Role.MANAGER)

        self.assertFalse(caps.can_create_users)
        self.assertTrue(caps.can_edit_users)
        self.assertTrue(caps.can_view_all_users)
        self.assertFalse(caps.can_manage_firm_assignments)

    def test_auditor_reads_details_only(self):
        caps = UserPermissions.for_role(User.Role.AUDIT)

        self.assertTrue(caps.can_view_user_details)
        self.assertFalse(caps.can_view_all_users)
        self.assertFalse(caps.can_edit_users)

    def test_user_has_nothing(self):
        self.assertEqual(UserPermissions.for_role(User.Role.USER), UserPermissions())

    def test_anonymous(self):
        self.assertEqual(UserPermissions.for_user(AnonymousUser()), UserPermissions())


class RoleBasedPermissionTestCase(SimpleTestCase):

    def check(self, role, action):
        return RoleBasedPermission().has_permission(request_for(role), Mock(action=action))

    def test_anonymous_denied(self):
        self.assertFalse(self.check(None, 'me'))

    def test_list(self):
        self.assertTrue(self.check(User.Role.MANAGER, 'list'))
        self.assertFalse(self.check(User.Role.AUDIT, 'list'))

    def test_retrieve_and_me_open_to_all(self):
        self.assertTrue(self.check(User.Role.USER, 'retrieve'))
        self.assertTrue(self.check(User.Role.USER, 'me'))

    def test_create(self):
        self.assertTrue(self.check(User.Role.OWNER, 'create'))
        self.assertFalse(self.check(User.Role.MANAGER, 'create'))

    def test_edit_actions(self):
        for action in ('partial_update', 'activate', 'deactivate', 'role'):
            self.assertTrue(self.check(User.Role.MANAGER, action))
            self.assertFalse(self.check(User.Role.USER, action))

    def test_firm_assignment_actions(self):
        for action in ('assign_firm', 'remove_firm'):
            self.assertTrue(self.check(User.Role.ADMIN, action))
            self.assertFalse(self.check(User.Role.MANAGER, action))

    def test_unknown_action_denied(self):
        self.assertFalse(self.check(User.Role.ADMIN, 'destroy'))


class IsPlatformAdminTestCase(SimpleTestCase):

    def test_admin_only(self):
        permission = IsPlatformAdmin()

        self.assertTrue(permission.has_permission(request_for(User.Role.ADMIN), None))
        self.assertFalse(permission.has_permission(request_for(User.Role.OWNER), None))
        self.assertFalse(permission.has_permission(request_for(), None))

from dataclasses import dataclass

from rest_framework import permissions

from .models import User


FIRM_ADMIN_ROLES = (User.Role.ADMIN, User.Role.OWNER)
USER_MANAGER_ROLES = (User.Role.ADMIN, User.Role.OWNER, User.Role.MANAGER)
USER_VIEWER_ROLES = USER_MANAGER_ROLES + (User.Role.AUDIT,)


@dataclass(frozen=True)
class UserPermissions:
    """Capabilities a role grants over users and firms"""
    can_create_users: bool = False
    can_edit_users: bool = False
    can_delete_users: bool = False
    can_create_firms: bool = False
    can_edit_firms: bool = False
    can_manage_firm_assignments: bool = False
    can_view_all_users: bool = False
    can_view_user_details: bool = False

    @classmethod
    def for_role(cls, role):
        return cls(
            can_create_users=role in FIRM_ADMIN_ROLES,
            can_edit_users=role in USER_MANAGER_ROLES,
            can_delete_users=role in FIRM_ADMIN_ROLES,
            can_create_firms=role in FIRM_ADMIN_ROLES,
            can_edit_firms=role in FIRM_ADMIN_ROLES,
            can_manage_firm_assignments=role in FIRM_ADMIN_ROLES,
            can_view_all_users=role in USER_MANAGER_ROLES,
            can_view_user_details=role in USER_VIEWER_ROLES,
        )

    @classmethod
    def for_user(cls, user):
        if not user or not user.is_authenticated:
            return cls()
        return cls.for_role(user.role)


class IsPlatformAdmin(permissions.BasePermission):
    """Only platform admins"""

    def has_permission(self, request, view):
        return bool(
            request.user
            and request.user.is_authenticated
            and request.user.role == User.Role.ADMIN
        )


class RoleBasedPermission(permissions.BasePermission):
    """Permission class for user management based on user roles"""

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False

        caps = UserPermissions.for_user(request.user)
        action = getattr(view, 'action', None)

        if action == 'list':
            return caps.can_view_all_users
        if action == 'retrieve':
            # Users may always read their own record; UserService checks the rest
            return True
        if action == 'create':
            return caps.can_create_users
        if action in ['update', 'partial_update', 'activate', 'deactivate', 'role']:
            return caps.can_edit_users
        if action in ['assign_firm', 'remove_firm']:
            return caps.can_manage_firm_assignments
        if action == 'me':
            return True

        return False


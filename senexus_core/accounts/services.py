"""
User management services.

Creation, activation, role changes and firm assignments. Every write is
checked against the acting user's role capabilities.
"""

import logging
from typing import Any, Dict, List, Optional

from django.core.exceptions import ValidationError
from django.utils import timezone

from senexus_core.core.services import (
    BaseService,
    PermissionServiceError,
    ValidationServiceError,
)
from senexus_core.firms.models import Firm

from .models import User, UserFirmAssignment
from .permissions import UserPermissions

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ['full_name', 'phone', 'position', 'department', 'hire_date']


class UserService(BaseService):
    """Service for managing users and their firm assignments"""

    def _capabilities(self) -> UserPermissions:
        return UserPermissions.for_user(self._require_user())

    def _require(self, capability: str, message: str) -> None:
        if not getattr(self._capabilities(), capability):
            raise PermissionServiceError(message)

    def _get_user(self, user_id) -> User:
        return self.get_or_404(User, pk=user_id)

    def _get_firm(self, firm_id) -> Firm:
        return self.get_or_404(Firm, pk=firm_id)

    def create_user(self, data: Dict[str, Any]) -> User:
        """
        Create a user with profile fields and firm assignments.

        Args:
            data: email, password, role, profile fields, ``is_active`` and
                ``assigned_firms`` (firm ids)

        Raises:
            PermissionServiceError: If the acting user cannot create users
            ValidationServiceError: On missing fields, unknown role or firm,
                or a duplicate email
        """
        self._require('can_create_users', "You do not have permission to create users")
        self.validate_required_fields(data, ['email', 'password'])

        role = data.get('role') or User.Role.USER
        if role not in User.Role.values:
            raise ValidationServiceError(f"Invalid role: {role}")

        firm_ids = list(data.get('assigned_firms') or [])
        try:
            firms = list(Firm.objects.filter(pk__in=firm_ids))
        except ValidationError:
            raise ValidationServiceError("Invalid firm id in assigned_firms")
        if len(firms) != len(set(str(f) for f in firm_ids)):
            raise ValidationServiceError("One or more assigned firms do not exist")

        email = User.objects.normalize_email(data['email'])
        if User.objects.filter(email__iexact=email).exists():
            raise ValidationServiceError(f"A user with email {email} already exists")

        def _create():
            user = User(
                email=email,
                username=data.get('username') or email,
                role=role,
                is_active=data.get('is_active', True),
            )
            for field in PROFILE_FIELDS:
                value = data.get(field)
                if value:
                    setattr(user, field, value)
            user.set_password(data['password'])
            user.save()

            UserFirmAssignment.objects.bulk_create([
                UserFirmAssignment(user=user, firm=firm, assigned_by=self.user)
                for firm in firms
            ])
            return user

        user = self._execute_with_transaction(_create)

        self._log_operation("create_user", {'email': user.email, 'firms': len(firms)})
        return user

    def _set_active(self, user_id, is_active: bool) -> User:
        self._require('can_edit_users', "You do not have permission to edit users")
        user = self._get_user(user_id)
        if user.pk == self.user.pk and not is_active:
            raise ValidationServiceError("You cannot deactivate your own account")

        user.is_active = is_active
        user.save(update_fields=['is_active', 'updated_at'])
        self._log_operation(
            "activate_user" if is_active else "deactivate_user",
            {'target': user.email},
        )
        return user

    def activate_user(self, user_id) -> User:
        return self._set_active(user_id, True)

    def deactivate_user(self, user_id) -> User:
        return self._set_active(user_id, False)

    def update_user_role(self, user_id, role: str) -> User:
        self._require('can_edit_users', "You do not have permission to edit users")
        if role not in User.Role.values:
            raise ValidationServiceError(f"Invalid role: {role}")

        # Only admins hand out or take away the admin role
        user = self._get_user(user_id)
        if User.Role.ADMIN in (role, user.role) and not self.user.is_platform_admin:
            raise PermissionServiceError("Only admins can change admin roles")

        user.role = role
        user.save(update_fields=['role', 'updated_at'])
        self._log_operation("update_user_role", {'target': user.email, 'role': role})
        return user

    def update_user(self, user_id, data: Dict[str, Any]) -> User:
        self._require('can_edit_users', "You do not have permission to edit users")
        user = self._get_user(user_id)
        updates = {field: data.get(field) for field in PROFILE_FIELDS}
        return self.safe_update(user, **updates)

    def assign_user_to_firm(self, user_id, firm_id) -> UserFirmAssignment:
        """Assign a user to a firm, re-activating a previous assignment if one exists."""
        self._require(
            'can_manage_firm_assignments',
            "You do not have permission to manage firm assignments"
        )
        user = self._get_user(user_id)
        firm = self._get_firm(firm_id)

        assignment, created = UserFirmAssignment.objects.get_or_create(
            user=user,
            firm=firm,
            defaults={'assigned_by': self.user},
        )
        if not created and not assignment.is_active:
            assignment.is_active = True
            assignment.assigned_by = self.user
            assignment.save(update_fields=['is_active', 'assigned_by'])

        self._log_operation("assign_user_to_firm", {'target': user.email, 'firm': firm.slug})
        return assignment

    def remove_user_from_firm(self, user_id, firm_id) -> bool:
        """Deactivate a user's assignment to a firm. Returns False if there was none."""
        self._require(
            'can_manage_firm_assignments',
            "You do not have permission to manage firm assignments"
        )
        assignment = UserFirmAssignment.objects.filter(
            user_id=user_id, firm_id=firm_id, is_active=True
        ).first()
        if assignment is None:
            return False

        assignment.is_active = False
        assignment.save(update_fields=['is_active'])
        self._log_operation(
            "remove_user_from_firm",
            {'target': assignment.user.email, 'firm': assignment.firm.slug},
        )
        return True

    def get_user_with_assignments(self, user_id) -> User:
        acting = self._require_user()
        if str(user_id) != str(acting.pk):
            self._require(
                'can_view_user_details',
                "You do not have permission to view this user"
            )
        user = self._get_user(user_id)
        user.active_assignments = list(
            user.firm_assignments.filter(is_active=True)
            .select_related('firm')
            .order_by('firm__name')
        )
        return user

    def list_users_with_assignments(self, role: Optional[str] = None) -> List[User]:
        self._require('can_view_all_users', "You do not have permission to list users")
        users = User.objects.select_related('firm').order_by('-created_at')
        if role:
            users = users.filter(role=role)

        assignments: Dict[Any, List[UserFirmAssignment]] = {}
        for assignment in (UserFirmAssignment.objects
                           .filter(user__in=users, is_active=True)
                           .select_related('firm')
                           .order_by('firm__name')):
            assignments.setdefault(assignment.user_id, []).append(assignment)

        result = list(users)
        for user in result:
            user.active_assignments = assignments.get(user.pk, [])
        return result

    @staticmethod
    def update_last_login(user: User) -> None:
        user.last_login_at = timezone.now()
        user.save(update_fields=['last_login_at'])
        logger.debug(f"Updated last login for {user.email}")


from django.contrib.auth.models import AbstractUser
from django.db import models
import uuid


class User(AbstractUser):
    """Custom user model with role-based access control"""

    class Role(models.TextChoices):
        ADMIN = 'admin', 'Admin'
        OWNER = 'owner', 'Owner'
        MANAGER = 'manager', 'Manager'
        AUDIT = 'audit', 'Auditor'
        USER = 'user', 'User'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.USER)

    # Profile
    full_name = models.CharField(max_length=200, blank=True)
    phone = models.CharField(max_length=50, blank=True)
    position = models.CharField(max_length=100, blank=True)
    department = models.CharField(max_length=100, blank=True)
    hire_date = models.DateField(null=True, blank=True)

    # Primary firm; further firms come from UserFirmAssignment
    firm = models.ForeignKey(
        'firms.Firm',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='primary_users',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    last_login_at = models.DateTimeField(null=True, blank=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    class Meta:
        db_table = 'users'

    def __str__(self):
        return f"{self.email} ({self.get_role_display()})"

    @property
    def is_platform_admin(self):
        return self.role == self.Role.ADMIN

    @property
    def can_access_all_firms(self):
        return self.role in [self.Role.ADMIN, self.Role.OWNER]


class UserFirmAssignment(models.Model):
    """Grants a user access to a firm other than (or in addition to) their primary one"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='firm_assignments')
    firm = models.ForeignKey('firms.Firm', on_delete=models.CASCADE, related_name='user_assignments')
    assigned_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    assigned_at = models.DateTimeField(auto_now_add=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'user_firm_assignments'
        unique_together = ['user', 'firm']

    def __str__(self):
        return f"{self.user.email} in {self.firm.name}"

"""
Module System Models

Defines the data models for the platform module system including:
- Module: catalogue entry for a toggleable feature unit
- FirmModule: per-firm enablement state and configuration
- ModulePermission / RoleModulePermission: role-based module permissions
- ModuleEvent: audit log of module lifecycle events
"""

import re
import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from senexus_core.core.models import BaseModel, FirmScopedModel, FirmScopedQuerySet


SLUG_PATTERN = re.compile(r'^[a-z][a-z0-9_]*$')


class ModuleQuerySet(models.QuerySet):

    def active(self):
        return self.filter(is_active=True)

    def core(self):
        return self.filter(is_core=True, is_active=True)


class Module(BaseModel):
    """
    Catalogue entry for a module that firms can enable.

    Dependencies and conflicts are lists of other module slugs. They are
    maintained by platform administrators; the enablement workflows only
    read them.
    """

    class Category(models.TextChoices):
        CORE = 'core', 'System'
        BUSINESS = 'business', 'Business'
        HEALTH = 'health', 'Health'
        COMMUNICATION = 'communication', 'Communication'
        ANALYTICS = 'analytics', 'Analytics'

    class PricingTier(models.TextChoices):
        FREE = 'free', 'Free'
        BASIC = 'basic', 'Basic'
        PREMIUM = 'premium', 'Premium'
        ENTERPRISE = 'enterprise', 'Enterprise'

    slug = models.CharField(
        max_length=100,
        unique=True,
        help_text="Unique identifier for the module (e.g., health_insurance)"
    )
    display_name = models.CharField(max_length=200, help_text="Human-readable module name")
    description = models.TextField(blank=True)
    icon = models.CharField(max_length=100, blank=True)
    color = models.CharField(max_length=7, blank=True)
    category = models.CharField(
        max_length=20,
        choices=Category.choices,
        default=Category.BUSINESS
    )
    pricing_tier = models.CharField(
        max_length=20,
        choices=PricingTier.choices,
        default=PricingTier.FREE
    )

    is_core = models.BooleanField(
        default=False,
        help_text="Core modules are enabled for every firm and cannot be disabled"
    )
    is_active = models.BooleanField(
        default=True,
        help_text="Whether this module is available in the catalogue"
    )
    sort_order = models.PositiveIntegerField(default=0)

    requires_modules = models.JSONField(
        default=list,
        blank=True,
        help_text="Slugs of modules that must be enabled first"
    )
    conflicts_with = models.JSONField(
        default=list,
        blank=True,
        help_text="Slugs of modules that cannot be enabled alongside this one"
    )

    objects = ModuleQuerySet.as_manager()

    class Meta:
        db_table = 'modules'
        ordering = ['sort_order', 'display_name']
        indexes = [
            models.Index(fields=['is_active', 'category'], name='modules_active_category_idx'),
        ]

    def __str__(self):
        return f"{self.display_name} ({self.slug})"

    def clean(self):
        """Validate module definition"""
        super().clean()

        if not self.slug or not SLUG_PATTERN.match(self.slug):
            raise ValidationError({
                'slug': 'Slug must be lowercase letters, digits and underscores (e.g., health_insurance)'
            })

        for field in ('requires_modules', 'conflicts_with'):
            value = getattr(self, field)
            if value is None:
                continue
            if not isinstance(value, list) or not all(isinstance(s, str) and s for s in value):
                raise ValidationError({field: 'Must be a list of module slugs'})
            if self.slug in value:
                raise ValidationError({field: 'A module cannot reference itself'})

        overlap = set(self.requires_modules or []) & set(self.conflicts_with or [])
        if overlap:
            raise ValidationError({
                'conflicts_with': f"Modules both required and conflicting: {', '.join(sorted(overlap))}"
            })


class FirmModuleQuerySet(FirmScopedQuerySet):

    def enabled(self):
        return self.filter(is_enabled=True)

    def enabled_slugs(self, firm):
        """Slugs of the modules currently enabled for ``firm``."""
        return list(
            self.filter(firm=firm, is_enabled=True)
            .values_list('module__slug', flat=True)
        )


class FirmModule(FirmScopedModel):
    """
    Represents a module enabled (or previously enabled) for a firm.
    Tracks enablement state and the firm's configuration of the module.
    """
    firm = models.ForeignKey(
        'firms.Firm',
        on_delete=models.CASCADE,
        related_name='firm_modules'
    )
    module = models.ForeignKey(
        Module,
        on_delete=models.PROTECT,
        related_name='firm_modules'
    )

    is_enabled = models.BooleanField(default=False)
    configuration = models.JSONField(
        default=dict,
        blank=True,
        help_text="Module configuration specific to this firm"
    )

    enabled_at = models.DateTimeField(null=True, blank=True)
    enabled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    disabled_at = models.DateTimeField(null=True, blank=True)
    disabled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )

    objects = FirmModuleQuerySet.as_manager()

    class Meta:
        db_table = 'firm_modules'
        unique_together = [('firm', 'module')]
        indexes = [
            models.Index(fields=['firm', 'is_enabled'], name='firm_modules_firm_enabled_idx'),
        ]

    def __str__(self):
        state = 'enabled' if self.is_enabled else 'disabled'
        return f"{self.module.display_name} for {self.firm.name} ({state})"

    def mark_enabled(self, user=None):
        self.is_enabled = True
        self.enabled_at = timezone.now()
        self.enabled_by = user

    def mark_disabled(self, user=None):
        self.is_enabled = False
        self.disabled_at = timezone.now()
        self.disabled_by = user


class ModulePermission(BaseModel):
    """
    A permission a module exposes, e.g. ``hr.contracts.sign``.
    """

    class Action(models.TextChoices):
        CREATE = 'create', 'Create'
        READ = 'read', 'Read'
        UPDATE = 'update', 'Update'
        DELETE = 'delete', 'Delete'
        SIGN = 'sign', 'Sign'
        GENERATE = 'generate', 'Generate'
        APPROVE = 'approve', 'Approve'
        PROCESS = 'process', 'Process'
        MANAGE = 'manage', 'Manage'

    class Scope(models.TextChoices):
        GLOBAL = 'global', 'Global'
        FIRM = 'firm', 'Firm'
        ENTITY = 'entity', 'Entity'
        SELF = 'self', 'Self'

    module = models.ForeignKey(
        Module,
        on_delete=models.CASCADE,
        related_name='permissions'
    )
    resource = models.CharField(max_length=100, blank=True)
    action = models.CharField(max_length=20, choices=Action.choices)
    scope = models.CharField(max_length=20, choices=Scope.choices, default=Scope.FIRM)
    description = models.TextField(blank=True)

    class Meta:
        db_table = 'module_permissions'
        unique_together = [('module', 'resource', 'action')]

    def __str__(self):
        return self.key

    @property
    def key(self):
        """Permission key in ``slug.action`` or ``slug.resource.action`` form."""
        if self.resource:
            return f"{self.module.slug}.{self.resource}.{self.action}"
        return f"{self.module.slug}.{self.action}"


class RoleModulePermission(FirmScopedModel):
    """Grants a module permission to every user with ``role`` in a firm."""
    firm = models.ForeignKey(
        'firms.Firm',
        on_delete=models.CASCADE,
        related_name='role_module_permissions'
    )
    role = models.CharField(max_length=20)
    permission = models.ForeignKey(
        ModulePermission,
        on_delete=models.CASCADE,
        related_name='role_grants'
    )

    class Meta:
        db_table = 'role_module_permissions'
        unique_together = [('firm', 'role', 'permission')]

    def __str__(self):
        return f"{self.role} may {self.permission.key} in {self.firm.name}"


class ModuleEvent(models.Model):
    """
    Audit log for module lifecycle events.
    Tracks all module-related actions for compliance and debugging.
    """

    class EventType(models.TextChoices):
        ENABLED = 'module.enabled', 'Module Enabled'
        DISABLED = 'module.disabled', 'Module Disabled'
        CONFIGURED = 'module.configured', 'Module Configured'
        REJECTED = 'module.rejected', 'Change Rejected'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    firm = models.ForeignKey(
        'firms.Firm',
        on_delete=models.CASCADE,
        related_name='module_events'
    )
    module = models.ForeignKey(
        Module,
        on_delete=models.CASCADE,
        related_name='events'
    )
    event_type = models.CharField(max_length=50, choices=EventType.choices)
    event_data = models.JSONField(default=dict, blank=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True
    )
    occurred_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'module_events'
        indexes = [
            models.Index(fields=['module', 'event_type', '-occurred_at'], name='module_events_module_type_idx'),
            models.Index(fields=['firm', '-occurred_at'], name='module_events_firm_time_idx'),
        ]
        ordering = ['-occurred_at']

    def __str__(self):
        return f"{self.event_type} for {self.module.slug} at {self.occurred_at}"

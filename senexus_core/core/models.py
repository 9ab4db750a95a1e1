"""
Base models for the platform.

These abstract models provide the primary key and timestamp conventions
shared by the accounts, firms and modules apps.
"""

import uuid
from django.db import models


class UUIDModel(models.Model):
    """
    Abstract model that uses UUID as primary key instead of auto-incrementing integer.

    Firm and module identifiers are exposed in URLs, so they should not be guessable.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class Meta:
        abstract = True


class TimestampedModel(models.Model):
    """
    Abstract model that provides created and updated timestamp fields.
    """
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['-created_at']


class BaseModel(UUIDModel, TimestampedModel):
    """UUID primary key plus timestamps."""

    class Meta:
        abstract = True
        ordering = ['-created_at']


class FirmScopedQuerySet(models.QuerySet):
    """
    QuerySet for rows that belong to a single firm.
    """

    def for_firm(self, firm):
        """Filter queryset for a specific firm."""
        if not firm:
            return self.none()
        return self.filter(firm=firm)


class FirmScopedModel(BaseModel):
    """
    Abstract model for per-firm data.

    Every row is owned by exactly one firm; the default manager offers
    ``for_firm`` filtering for tenant isolation.
    """
    firm = models.ForeignKey(
        'firms.Firm',
        on_delete=models.CASCADE,
        related_name='%(app_label)s_%(class)s_set',
        help_text="The firm this object belongs to",
    )

    objects = FirmScopedQuerySet.as_manager()

    class Meta:
        abstract = True
        ordering = ['-created_at']

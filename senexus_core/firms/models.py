"""
Firm Models

Defines the tenant hierarchy:
- SenexusGroup: the holding group that owns every firm
- Firm: an isolated customer organization (the tenant)
- Entity: a legal entity operated by a firm
"""

import re

from django.core.exceptions import ValidationError
from django.db import models
from django.utils.text import slugify

from senexus_core.core.models import BaseModel, FirmScopedModel


class SenexusGroup(BaseModel):
    """Holding group that firms belong to."""
    name = models.CharField(max_length=200, unique=True)
    description = models.TextField(blank=True)

    class Meta:
        db_table = 'senexus_groups'
        ordering = ['name']

    def __str__(self):
        return self.name


class FirmQuerySet(models.QuerySet):

    def active(self):
        return self.filter(is_active=True)


class Firm(BaseModel):
    """
    A tenant of the platform.

    Firms are soft-deleted: ``is_active`` goes false and the row stays so
    module history and user assignments remain auditable.
    """
    senexus_group = models.ForeignKey(
        SenexusGroup,
        on_delete=models.PROTECT,
        related_name='firms',
    )
    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=200, unique=True)
    type = models.CharField(max_length=100, help_text="Business type of the firm")
    description = models.TextField(blank=True)
    logo = models.CharField(max_length=500, blank=True)
    theme_color = models.CharField(max_length=7, default='#3b82f6')
    is_active = models.BooleanField(default=True, db_index=True)

    objects = FirmQuerySet.as_manager()

    class Meta:
        db_table = 'firms'
        ordering = ['name']

    def __str__(self):
        return self.name

    def clean(self):
        super().clean()
        if self.theme_color and not re.match(r'^#[0-9a-fA-F]{6}$', self.theme_color):
            raise ValidationError({
                'theme_color': 'Theme color must be a hex color (e.g., #3b82f6)'
            })

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = self._unique_slug()
        super().save(*args, **kwargs)

    def _unique_slug(self):
        base = slugify(self.name) or 'firm'
        candidate = base
        suffix = 2
        while Firm.objects.filter(slug=candidate).exclude(pk=self.pk).exists():
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate


class Entity(FirmScopedModel):
    """A legal entity (company, branch) operated by a firm."""
    firm = models.ForeignKey(
        Firm,
        on_delete=models.CASCADE,
        related_name='entities',
    )
    name = models.CharField(max_length=200)
    industry = models.CharField(max_length=100, blank=True)
    address = models.TextField(blank=True)
    contact_email = models.EmailField(blank=True)
    contact_phone = models.CharField(max_length=50, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'entities'
        verbose_name_plural = 'entities'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.firm.name})"

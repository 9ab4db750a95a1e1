"""
Shared fixtures for the test suites.
"""

from django.test import TestCase
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import RefreshToken

from senexus_core.accounts.models import User, UserFirmAssignment
from senexus_core.firms.models import Firm, SenexusGroup
from senexus_core.modules.catalogue import DEFAULT_CATALOGUE
from senexus_core.modules.models import FirmModule, Module


class SenexusFixturesMixin:
    """Factory helpers for users, firms and modules"""

    def make_group(self, name='Senexus Group'):
        group, _ = SenexusGroup.objects.get_or_create(name=name)
        return group

    def make_firm(self, name='Acme Consulting', **kwargs):
        kwargs.setdefault('type', 'Consulting')
        kwargs.setdefault('senexus_group', self.make_group())
        return Firm.objects.create(name=name, **kwargs)

    def make_user(self, email='user@example.com', role=User.Role.USER, firm=None, **kwargs):
        return User.objects.create_user(
            username=email,
            email=email,
            password='testpass123',
            role=role,
            firm=firm,
            **kwargs
        )

    def assign(self, user, firm, is_active=True):
        return UserFirmAssignment.objects.create(user=user, firm=firm, is_active=is_active)

    def make_module(self, slug, **kwargs):
        kwargs.setdefault('display_name', slug.replace('_', ' ').title())
        return Module.objects.create(slug=slug, **kwargs)

    def load_catalogue(self):
        return {
            data['slug']: Module.objects.create(**data)
            for data in DEFAULT_CATALOGUE
        }

    def enable(self, firm, *modules):
        for module in modules:
            firm_module, _ = FirmModule.objects.get_or_create(firm=firm, module=module)
            firm_module.mark_enabled()
            firm_module.save()


class SenexusTestCase(SenexusFixturesMixin, TestCase):
    pass


class SenexusAPITestCase(SenexusFixturesMixin, APITestCase):

    def authenticate(self, user):
        refresh = RefreshToken.for_user(user)
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')

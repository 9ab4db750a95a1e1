"""
Tests for firm services
"""

from senexus_core.accounts.models import User
from senexus_core.core.services import (
    NotFoundServiceError,
    PermissionServiceError,
    ValidationServiceError,
)
from senexus_core.core.testing import SenexusTestCase
from senexus_core.firms.models import Entity, Firm
from senexus_core.firms.services import FirmService
from senexus_core.firms.signals import firm_created
from senexus_core.modules.exceptions import ModuleValidationError
from senexus_core.modules.models import FirmModule


class CreateFirmTestCase(SenexusTestCase):

    def setUp(self):
        super().setUp()
        self.group = self.make_group()
        self.modules = self.load_catalogue()
        self.admin = self.make_user('admin@example.com', role=User.Role.ADMIN)
        self.service = FirmService(user=self.admin)

    def create(self, **data):
        data.setdefault('name', 'Acme Consulting')
        data.setdefault('type', 'Consulting')
        return self.service.create_firm_with_modules(data)

    def test_creates_firm_with_modules(self):
        firm = self.create(selected_modules=['hr', 'health_insurance', 'claims'])

        self.assertEqual(firm.slug, 'acme-consulting')
        self.assertEqual(firm.senexus_group, self.group)
        self.assertEqual(
            sorted(FirmModule.objects.enabled_slugs(firm)),
            ['claims', 'dashboard', 'health_insurance', 'hr', 'settings']
        )

    def test_core_modules_always_enabled(self):
        firm = self.create()

        self.assertEqual(sorted(FirmModule.objects.enabled_slugs(firm)), ['dashboard', 'settings'])

    def test_modules_get_default_configuration(self):
        firm = self.create(selected_modules=['crm'])

        firm_module = FirmModule.objects.get(firm=firm, module__slug='crm')
        self.assertEqual(firm_module.configuration['auto_follow_up_days'], 7)
        self.assertEqual(firm_module.enabled_by, self.admin)
        self.assertIsNotNone(firm_module.enabled_at)

    def test_selection_order_does_not_matter(self):
        firm = self.create(selected_modules=['claims', 'health_insurance'])

        self.assertIn('claims', FirmModule.objects.enabled_slugs(firm))

    def test_missing_dependency_writes_nothing(self):
        with self.assertRaises(ModuleValidationError) as ctx:
            self.create(selected_modules=['hr', 'claims'])

        self.assertEqual(
            str(ctx.exception),
            'Cannot enable Claims: Missing required modules: health_insurance'
        )
        self.assertEqual(ctx.exception.module.slug, 'claims')
        self.assertFalse(Firm.objects.exists())
        self.assertFalse(FirmModule.objects.exists())

    def test_conflicting_selection_rejected(self):
        self.make_module('legacy_crm', conflicts_with=['crm'])

        with self.assertRaises(ModuleValidationError) as ctx:
            self.create(selected_modules=['crm', 'legacy_crm'])

        self.assertEqual(ctx.exception.module.slug, 'legacy_crm')
        self.assertFalse(Firm.objects.exists())

    def test_unknown_module_rejected(self):
        with self.assertRaises(ValidationServiceError):
            self.create(selected_modules=['hr', 'teleportation'])

        self.assertFalse(Firm.objects.exists())

    def test_retired_module_rejected(self):
        self.modules['hr'].is_active = False
        self.modules['hr'].save()

        with self.assertRaises(ValidationServiceError):
            self.create(selected_modules=['hr'])

    def test_required_fields(self):
        with self.assertRaises(ValidationServiceError):
            self.service.create_firm_with_modules({'name': 'No Type'})

    def test_invalid_theme_color(self):
        with self.assertRaises(ValidationServiceError):
            self.create(theme_color='blue')

        self.assertFalse(Firm.objects.exists())

    def test_duplicate_names_get_unique_slugs(self):
        first = self.create()
        second = self.create()

        self.assertEqual(first.slug, 'acme-consulting')
        self.assertEqual(second.slug, 'acme-consulting-2')

    def test_admin_only(self):
        owner = self.make_user('owner@example.com', role=User.Role.OWNER)

        with self.assertRaises(PermissionServiceError):
            FirmService(user=owner).create_firm_with_modules({'name': 'Acme', 'type': 'Consulting'})

    def test_missing_group(self):
        self.group.name = 'Other Group'
        self.group.save()

        with self.assertRaises(NotFoundServiceError):
            self.create()

    def test_sends_firm_created_after_commit(self):
        received = []

        def handler(sender, firm, modules, **kwargs):
            received.append((firm.slug, [m.slug for m in modules]))

        firm_created.connect(handler)
        self.addCleanup(firm_created.disconnect, handler)

        with self.captureOnCommitCallbacks(execute=True):
            self.create(selected_modules=['hr'])

        self.assertEqual(received, [('acme-consulting', ['dashboard', 'settings', 'hr'])])


class FirmAccessTestCase(SenexusTestCase):

    def setUp(self):
        super().setUp()
        self.acme = self.make_firm('Acme Consulting')
        self.beta = self.make_firm('Beta Health')
        self.closed = self.make_firm('Closed Firm', is_active=False)
        self.member = self.make_user('member@example.com', firm=self.acme)
        self.owner = self.make_user('owner@example.com', role=User.Role.OWNER)
        self.admin = self.make_user('admin@example.com', role=User.Role.ADMIN)

    def test_member_sees_own_firms(self):
        self.assign(self.member, self.beta)

        firms = FirmService(user=self.member).list_user_firms()

        self.assertEqual([f.slug for f in firms], ['acme-consulting', 'beta-health'])

    def test_owner_sees_all_active_firms(self):
        firms = FirmService(user=self.owner).list_user_firms()

        self.assertEqual([f.slug for f in firms], ['acme-consulting', 'beta-health'])

    def test_get_firm_by_slug(self):
        firm = FirmService(user=self.member).get_firm_by_slug('acme-consulting')

        self.assertEqual(firm, self.acme)

    def test_get_inaccessible_firm(self):
        with self.assertRaises(NotFoundServiceError):
            FirmService(user=self.member).get_firm_by_slug('beta-health')

    def test_get_inactive_firm(self):
        with self.assertRaises(NotFoundServiceError):
            FirmService(user=self.admin).get_firm_by_slug('closed-firm')

    def test_update_firm(self):
        firm = FirmService(user=self.member).update_firm(
            self.acme, {'description': 'Advisory', 'theme_color': '#112233'}
        )

        firm.refresh_from_db()
        self.assertEqual(firm.description, 'Advisory')
        self.assertEqual(firm.theme_color, '#112233')
        self.assertEqual(firm.name, 'Acme Consulting')

    def test_update_other_firm_forbidden(self):
        with self.assertRaises(PermissionServiceError):
            FirmService(user=self.member).update_firm(self.beta, {'name': 'Taken'})

    def test_update_rejects_invalid_color(self):
        with self.assertRaises(ValidationServiceError):
            FirmService(user=self.admin).update_firm(self.acme, {'theme_color': 'red'})

    def test_delete_firm(self):
        FirmService(user=self.admin).delete_firm(self.beta)

        self.beta.refresh_from_db()
        self.assertFalse(self.beta.is_active)

    def test_delete_refused_with_active_entities(self):
        Entity.objects.create(firm=self.beta, name='Beta SARL')

        with self.assertRaises(ValidationServiceError):
            FirmService(user=self.admin).delete_firm(self.beta)

        self.beta.refresh_from_db()
        self.assertTrue(self.beta.is_active)

    def test_delete_admin_only(self):
        with self.assertRaises(PermissionServiceError):
            FirmService(user=self.owner).delete_firm(self.beta)

"""
Tests for the module service workflows
"""

from datetime import timedelta
from unittest import mock

from django.utils import timezone

from senexus_core.accounts.models import User
from senexus_core.core.testing import SenexusTestCase
from senexus_core.firms.models import Firm
from senexus_core.modules import signals
from senexus_core.modules.exceptions import (
    DependentModulesError,
    ModuleConfigurationError,
    ModuleError,
    ModuleNotFoundError,
    ModulePermissionError,
    ModuleStateError,
    ModuleValidationError,
)
from senexus_core.modules.models import (
    FirmModule,
    ModuleEvent,
    ModulePermission,
    RoleModulePermission,
)
from senexus_core.modules.services import ModuleService


class ModuleServiceTestCase(SenexusTestCase):

    def setUp(self):
        super().setUp()
        self.firm = self.make_firm()
        self.modules = self.load_catalogue()
        self.member = self.make_user('member@example.com', firm=self.firm)
        self.outsider = self.make_user('outsider@example.com')
        self.admin = self.make_user('admin@example.com', role=User.Role.ADMIN)
        self.service = ModuleService(user=self.member, context={'firm': self.firm})
        self.enable(self.firm, self.modules['dashboard'], self.modules['settings'])

    def enabled(self):
        return sorted(FirmModule.objects.enabled_slugs(self.firm))


class ToggleFirmModuleTestCase(ModuleServiceTestCase):
    """Enable and disable workflows"""

    def test_enable_module_without_requirements(self):
        firm_module = self.service.toggle_firm_module(self.firm, 'hr', True)

        self.assertTrue(firm_module.is_enabled)
        self.assertEqual(firm_module.enabled_by, self.member)
        self.assertIn('hr', self.enabled())

    def test_enable_stores_default_configuration(self):
        firm_module = self.service.toggle_firm_module(self.firm, 'hr', True)

        self.assertEqual(firm_module.configuration['default_contract_type'], 'CDI')
        self.assertEqual(firm_module.configuration['annual_leave_days'], 25)

    def test_enable_rejected_when_dependency_missing(self):
        with self.assertRaises(ModuleValidationError) as ctx:
            self.service.toggle_firm_module(self.firm, 'claims', True)

        self.assertEqual(str(ctx.exception), 'Missing required modules: health_insurance')
        self.assertEqual(ctx.exception.result.missing_dependencies, ('health_insurance',))
        self.assertNotIn('claims', self.enabled())
        self.assertTrue(ModuleEvent.objects.filter(
            firm=self.firm,
            module=self.modules['claims'],
            event_type=ModuleEvent.EventType.REJECTED,
        ).exists())

    def test_enable_after_dependency(self):
        self.service.toggle_firm_module(self.firm, 'health_insurance', True)
        self.service.toggle_firm_module(self.firm, 'claims', True)

        self.assertEqual(
            self.enabled(),
            ['claims', 'dashboard', 'health_insurance', 'settings']
        )

    def test_enable_rejected_on_conflict(self):
        legacy = self.make_module('legacy_crm', conflicts_with=['crm'])
        self.enable(self.firm, self.modules['crm'])

        with self.assertRaises(ModuleValidationError) as ctx:
            self.service.toggle_firm_module(self.firm, legacy.slug, True)

        self.assertEqual(str(ctx.exception), 'Conflicts with enabled modules: crm')
        self.assertEqual(ctx.exception.details['validation']['conflicting_modules'], ['crm'])

    def test_enable_already_enabled_is_a_no_op(self):
        self.service.toggle_firm_module(self.firm, 'hr', True)
        self.service.toggle_firm_module(self.firm, 'hr', True)

        self.assertEqual(
            ModuleEvent.objects.filter(
                module=self.modules['hr'], event_type=ModuleEvent.EventType.ENABLED
            ).count(),
            1
        )

    def test_disable_core_module_refused(self):
        with self.assertRaises(ModuleStateError):
            self.service.toggle_firm_module(self.firm, 'dashboard', False)

        self.assertIn('dashboard', self.enabled())

    def test_disable_refused_while_dependents_enabled(self):
        self.enable(self.firm, self.modules['health_insurance'], self.modules['claims'])

        with self.assertRaises(DependentModulesError) as ctx:
            self.service.toggle_firm_module(self.firm, 'health_insurance', False)

        self.assertEqual(ctx.exception.dependents, ['claims'])
        self.assertIn('Claims', str(ctx.exception))
        self.assertIn('health_insurance', self.enabled())

    def test_disable_after_dependents_disabled(self):
        self.enable(self.firm, self.modules['health_insurance'], self.modules['claims'])

        self.service.toggle_firm_module(self.firm, 'claims', False)
        firm_module = self.service.toggle_firm_module(self.firm, 'health_insurance', False)

        self.assertFalse(firm_module.is_enabled)
        self.assertEqual(firm_module.disabled_by, self.member)
        self.assertEqual(self.enabled(), ['dashboard', 'settings'])

    def test_reenable_keeps_configuration(self):
        self.service.toggle_firm_module(self.firm, 'hr', True)
        self.service.update_module_configuration(self.firm, 'hr', {'annual_leave_days': 28})
        self.service.toggle_firm_module(self.firm, 'hr', False)

        firm_module = self.service.toggle_firm_module(self.firm, 'hr', True)

        self.assertEqual(firm_module.configuration['annual_leave_days'], 28)

    def test_disable_never_enabled_module(self):
        self.assertIsNone(self.service.toggle_firm_module(self.firm, 'hr', False))

    def test_disable_retired_module(self):
        self.service.toggle_firm_module(self.firm, 'hr', True)
        self.modules['hr'].is_active = False
        self.modules['hr'].save()

        firm_module = self.service.toggle_firm_module(self.firm, 'hr', False)

        self.assertFalse(firm_module.is_enabled)
        self.assertNotIn('hr', self.enabled())

    def test_enable_retired_module_refused(self):
        self.modules['hr'].is_active = False
        self.modules['hr'].save()

        with self.assertRaises(ModuleNotFoundError):
            self.service.toggle_firm_module(self.firm, 'hr', True)

    def test_toggle_locks_firm_row(self):
        with mock.patch.object(
            Firm.objects, 'select_for_update', wraps=Firm.objects.select_for_update
        ) as select_for_update:
            self.service.toggle_firm_module(self.firm, 'hr', True)

        select_for_update.assert_called_once_with()

    def test_unknown_module(self):
        with self.assertRaises(ModuleNotFoundError):
            self.service.toggle_firm_module(self.firm, 'nope', True)

    def test_outsider_cannot_toggle(self):
        service = ModuleService(user=self.outsider)

        with self.assertRaises(ModulePermissionError):
            service.toggle_firm_module(self.firm, 'hr', True)

    def test_admin_can_toggle_any_firm(self):
        service = ModuleService(user=self.admin)

        service.toggle_firm_module(self.firm, 'hr', True)

        self.assertIn('hr', self.enabled())

    def test_signals_sent_on_change_only(self):
        calls = []

        def handler(sender, **kwargs):
            calls.append((kwargs['module'].slug, kwargs['firm']))

        signals.module_enabled.connect(handler)
        self.addCleanup(signals.module_enabled.disconnect, handler)

        self.service.toggle_firm_module(self.firm, 'hr', True)
        self.service.toggle_firm_module(self.firm, 'hr', True)

        self.assertEqual(calls, [('hr', self.firm)])


class ModuleConfigurationTestCase(ModuleServiceTestCase):

    def setUp(self):
        super().setUp()
        self.service.toggle_firm_module(self.firm, 'hr', True)

    def test_update_merges_configuration(self):
        firm_module = self.service.update_module_configuration(
            self.firm, 'hr', {'annual_leave_days': 30}
        )

        self.assertEqual(firm_module.configuration['annual_leave_days'], 30)
        self.assertEqual(firm_module.configuration['probation_period_days'], 90)
        event = ModuleEvent.objects.get(event_type=ModuleEvent.EventType.CONFIGURED)
        self.assertEqual(event.event_data, {'changed': ['annual_leave_days']})

    def test_invalid_configuration_rejected(self):
        with self.assertRaises(ModuleConfigurationError):
            self.service.update_module_configuration(self.firm, 'hr', {'annual_leave_days': 'lots'})

        firm_module = FirmModule.objects.get(firm=self.firm, module=self.modules['hr'])
        self.assertEqual(firm_module.configuration['annual_leave_days'], 25)

    def test_module_must_be_enabled(self):
        with self.assertRaises(ModuleStateError):
            self.service.update_module_configuration(self.firm, 'crm', {})

    def test_manager_outside_firm_may_configure(self):
        manager = self.make_user('manager@example.com', role=User.Role.MANAGER)
        service = ModuleService(user=manager)

        service.update_module_configuration(self.firm, 'hr', {'notice_period_days': 60})

    def test_outsider_may_not_configure(self):
        service = ModuleService(user=self.outsider)

        with self.assertRaises(ModulePermissionError):
            service.update_module_configuration(self.firm, 'hr', {'notice_period_days': 60})

    def test_configured_signal(self):
        received = []

        def handler(sender, **kwargs):
            received.append(kwargs['configuration'])

        signals.module_configured.connect(handler)
        self.addCleanup(signals.module_configured.disconnect, handler)

        self.service.update_module_configuration(self.firm, 'hr', {'annual_leave_days': 27})

        self.assertEqual(received[0]['annual_leave_days'], 27)


class ModuleQueriesTestCase(ModuleServiceTestCase):

    def test_get_firm_modules(self):
        self.enable(self.firm, self.modules['health_insurance'])

        data = self.service.get_firm_modules(self.firm)

        self.assertEqual(data['enabled_modules'], ['dashboard', 'health_insurance', 'settings'])
        entries = {entry['module'].slug: entry for entry in data['modules']}
        self.assertEqual(len(entries), 13)
        self.assertTrue(entries['health_insurance']['is_enabled'])
        self.assertTrue(entries['claims']['dependencies_met'])
        self.assertFalse(entries['analytics']['dependencies_met'])
        self.assertEqual(
            [entry['module'].slug for entry in data['modules']][:2],
            ['dashboard', 'settings']
        )

    def test_get_firm_modules_requires_access(self):
        with self.assertRaises(ModulePermissionError):
            ModuleService(user=self.outsider).get_firm_modules(self.firm)

    def test_get_available_modules(self):
        self.modules['projects'].is_active = False
        self.modules['projects'].save()

        modules = self.service.get_available_modules()

        self.assertNotIn('projects', [m.slug for m in modules])
        self.assertEqual(modules[0].category, 'analytics')

    def test_user_module_permissions(self):
        sign = ModulePermission.objects.create(
            module=self.modules['hr'], resource='contracts', action='sign'
        )
        read = ModulePermission.objects.create(module=self.modules['hr'], action='read')
        RoleModulePermission.objects.create(firm=self.firm, role=User.Role.USER, permission=sign)
        RoleModulePermission.objects.create(firm=self.firm, role=User.Role.MANAGER, permission=read)

        self.assertEqual(self.service.get_user_module_permissions(self.firm), ['hr.contracts.sign'])

    def test_admin_permissions_include_admin_keys(self):
        keys = ModuleService(user=self.admin).get_user_module_permissions(self.firm)

        self.assertEqual(keys, ['admin', 'settings.modules.manage'])

    def test_module_analytics(self):
        self.service.toggle_firm_module(self.firm, 'hr', True)
        self.service.toggle_firm_module(self.firm, 'hr', False)
        ModuleService(user=self.admin).toggle_firm_module(self.firm, 'hr', True)

        analytics = self.service.get_module_analytics(self.firm, 'hr')

        self.assertEqual(analytics['event_count'], 3)
        self.assertEqual(analytics['user_count'], 2)
        self.assertEqual(analytics['events_by_type'], {'module.enabled': 2, 'module.disabled': 1})
        self.assertIsNotNone(analytics['last_event_at'])


    def test_get_firm_modules_features(self):
        self.service.toggle_firm_module(self.firm, 'hr', True)
        self.service.update_module_configuration(self.firm, 'hr', {'contract_renewal_alerts': False})

        entries = {
            entry['module'].slug: entry
            for entry in self.service.get_firm_modules(self.firm)['modules']
        }

        self.assertFalse(entries['hr']['features']['contract_alerts'])
        self.assertTrue(entries['hr']['features']['sick_leave_tracking'])
        self.assertEqual(entries['crm']['features'], {})

    def test_get_module_events(self):
        self.service.toggle_firm_module(self.firm, 'hr', True)
        self.service.toggle_firm_module(self.firm, 'crm', True)
        ModuleEvent.objects.filter(module=self.modules['hr']).update(
            occurred_at=timezone.now() - timedelta(hours=1)
        )

        events = self.service.get_module_events(self.firm)

        self.assertEqual([e.module.slug for e in events], ['crm', 'hr'])
        self.assertEqual(events[0].user, self.member)

    def test_get_module_events_for_one_module(self):
        self.service.toggle_firm_module(self.firm, 'hr', True)
        self.service.toggle_firm_module(self.firm, 'crm', True)

        events = self.service.get_module_events(self.firm, module_slug='hr')

        self.assertEqual([e.event_type for e in events], [ModuleEvent.EventType.ENABLED])

    def test_get_module_events_other_firm_hidden(self):
        other = self.make_firm('Other Firm')
        ModuleService(user=self.admin).toggle_firm_module(other, 'hr', True)

        self.assertEqual(self.service.get_module_events(self.firm), [])

    def test_get_module_events_requires_access(self):
        with self.assertRaises(ModulePermissionError):
            ModuleService(user=self.outsider).get_module_events(self.firm)


class InstallDefaultModulesTestCase(SenexusTestCase):

    def setUp(self):
        super().setUp()
        self.firm = self.make_firm()
        self.admin = self.make_user('admin@example.com', role=User.Role.ADMIN)
        self.service = ModuleService(user=self.admin)

    def test_installs_core_modules(self):
        self.load_catalogue()

        installed = self.service.install_default_modules(self.firm)

        self.assertEqual(sorted(fm.module.slug for fm in installed), ['dashboard', 'settings'])
        self.assertTrue(all(fm.is_enabled for fm in installed))

    def test_is_idempotent(self):
        self.load_catalogue()
        self.service.install_default_modules(self.firm)
        self.service.install_default_modules(self.firm)

        self.assertEqual(FirmModule.objects.for_firm(self.firm).count(), 2)

    def test_requires_core_modules(self):
        self.make_module('hr')

        with self.assertRaises(ModuleError):
            self.service.install_default_modules(self.firm)

    def test_admin_only(self):
        self.load_catalogue()
        owner = self.make_user('owner@example.com', role=User.Role.OWNER)

        with self.assertRaises(ModulePermissionError):
            ModuleService(user=owner).install_default_modules(self.firm)

"""
Tests for module helper functions
"""

from types import SimpleNamespace

from senexus_core.modules.utils import (
    get_enabled_modules,
    get_missing_dependencies,
    has_permission,
    is_module_enabled,
    permission_key,
    sort_modules,
)


def module(slug, **kwargs):
    kwargs.setdefault('display_name', slug.title())
    kwargs.setdefault('is_core', False)
    kwargs.setdefault('category', 'business')
    kwargs.setdefault('sort_order', 0)
    kwargs.setdefault('requires_modules', [])
    return SimpleNamespace(slug=slug, **kwargs)


def firm_module(mod, is_enabled=True):
    return SimpleNamespace(module=mod, module_id=mod.slug, is_enabled=is_enabled)


class TestEnabledModules:

    def test_is_module_enabled(self):
        firm_modules = [firm_module(module('hr')), firm_module(module('crm'), is_enabled=False)]

        assert is_module_enabled(firm_modules, 'hr')
        assert not is_module_enabled(firm_modules, 'crm')
        assert not is_module_enabled(firm_modules, 'finance')

    def test_get_enabled_modules_sorted(self):
        hr = module('hr', sort_order=10)
        dashboard = module('dashboard', sort_order=1)
        crm = module('crm', sort_order=5)

        result = get_enabled_modules([
            firm_module(hr),
            firm_module(crm, is_enabled=False),
            firm_module(dashboard),
        ])

        assert [m.slug for m in result] == ['dashboard', 'hr']


class TestPermissions:

    def test_permission_key(self):
        assert permission_key('hr', 'read') == 'hr.read'
        assert permission_key('hr', 'sign', 'contracts') == 'hr.contracts.sign'

    def test_has_permission(self):
        granted = ['hr.read', 'hr.contracts.sign']

        assert has_permission(granted, 'hr', 'read')
        assert has_permission(granted, 'hr', 'sign', 'contracts')
        assert not has_permission(granted, 'hr', 'delete')
        assert not has_permission(granted, 'finance', 'read')

    def test_admin_grants_everything(self):
        assert has_permission(['admin'], 'finance', 'delete', 'invoices')


class TestDependencies:

    def test_missing_dependencies(self):
        analytics = module('analytics', requires_modules=['reports', 'dashboard'])

        assert get_missing_dependencies(analytics, ['dashboard']) == ['reports']
        assert get_missing_dependencies(analytics, ['dashboard', 'reports']) == []

    def test_null_requirements(self):
        assert get_missing_dependencies(module('hr', requires_modules=None), []) == []


def test_sort_modules_core_first():
    modules = [
        module('reports', category='analytics', sort_order=40),
        module('settings', category='core', is_core=True, sort_order=2),
        module('hr', sort_order=10),
        module('dashboard', category='core', is_core=True, sort_order=1),
        module('finance', sort_order=10, display_name='Finance'),
    ]

    result = [m.slug for m in sort_modules(modules)]

    assert result == ['dashboard', 'settings', 'reports', 'finance', 'hr']

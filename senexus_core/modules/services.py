"""
Module Services

Enable, disable and configure modules for a firm. Enablement changes are
checked against the firm's persisted enabled set with the pure validator
in ``validation``, then written with an audit event.
"""

from typing import Any, Dict, List, Optional

from django.db import transaction
from django.db.models import Count, Max

from senexus_core.accounts.access import get_user_firm_access
from senexus_core.accounts.models import User
from senexus_core.core.services import BaseService
from senexus_core.firms.models import Firm

from .configuration import load_config, parse_config
from .exceptions import (
    DependentModulesError,
    ModuleError,
    ModuleNotFoundError,
    ModulePermissionError,
    ModuleStateError,
    ModuleValidationError,
)
from .models import FirmModule, Module, ModuleEvent, RoleModulePermission
from .signals import module_configured, module_disabled, module_enabled
from .utils import sort_modules
from .validation import ModuleRecord, find_dependents, validate

CONFIGURATION_ROLES = (User.Role.ADMIN, User.Role.MANAGER)


class ModuleService(BaseService):
    """Service for managing the modules enabled for a firm"""

    def _check_firm_access(self, firm) -> None:
        user = self._require_user()
        if not get_user_firm_access(user).can_access(firm):
            raise ModulePermissionError("You do not have access to this firm")

    def _get_module(self, slug: str, active_only: bool = True) -> Module:
        modules = Module.objects.active() if active_only else Module.objects.all()
        try:
            return modules.get(slug=slug)
        except Module.DoesNotExist:
            raise ModuleNotFoundError(f"Module '{slug}' not found")

    def _record_event(self, firm, module, event_type, data=None) -> ModuleEvent:
        return ModuleEvent.objects.create(
            firm=firm,
            module=module,
            event_type=event_type,
            event_data=data or {},
            user=self.user,
        )

    def _reject(self, firm, module, error: ModuleError, data: Dict[str, Any]):
        self._record_event(
            firm, module, ModuleEvent.EventType.REJECTED,
            dict(data, error=str(error)),
        )
        self._log_operation(
            "toggle_firm_module_rejected",
            {'module': module.slug, 'error': str(error)},
            level='warning',
        )
        raise error

    def get_firm_modules(self, firm) -> Dict[str, Any]:
        """
        Active modules with their status for ``firm``.

        Returns:
            ``{'modules': [...], 'enabled_modules': [slug, ...]}`` where each
            entry holds the module, its firm state, whether its dependencies
            are met, which enabled modules it conflicts with and, for enabled
            modules, the feature flags derived from its configuration.
        """
        self._check_firm_access(firm)

        firm_modules = {
            fm.module_id: fm
            for fm in FirmModule.objects.for_firm(firm).select_related('module')
        }
        enabled_slugs = [
            fm.module.slug for fm in firm_modules.values() if fm.is_enabled
        ]

        entries = []
        for module in sort_modules(Module.objects.active()):
            fm = firm_modules.get(module.pk)
            is_enabled = bool(fm and fm.is_enabled)
            result = validate(module, enabled_slugs)
            features = load_config(module.slug, fm.configuration).features() if is_enabled else {}
            entries.append({
                'module': module,
                'is_enabled': is_enabled,
                'enabled_at': fm.enabled_at if fm else None,
                'configuration': fm.configuration if fm else {},
                'dependencies_met': not result.missing_dependencies,
                'conflicts': list(result.conflicting_modules),
                'features': features,
            })

        return {'modules': entries, 'enabled_modules': sorted(enabled_slugs)}

    def toggle_firm_module(self, firm, module_slug: str, enabled: bool) -> FirmModule:
        """
        Enable or disable a module for a firm.

        Enabling validates the module against the firm's currently enabled
        modules. Disabling is refused for core modules and for modules that
        other enabled modules require.

        Raises:
            ModuleValidationError: Missing dependencies or conflicts
            ModuleStateError: Disabling a core module
            DependentModulesError: Disabling a module others depend on
        """
        self._check_firm_access(firm)
        # Retired modules can still be switched off for firms that have them
        module = self._get_module(module_slug, active_only=enabled)

        with transaction.atomic():
            # Serializes toggles per firm, including first-time enables
            Firm.objects.select_for_update().get(pk=firm.pk)
            enabled_slugs = FirmModule.objects.enabled_slugs(firm)
            firm_module = FirmModule.objects.filter(firm=firm, module=module).first()

            if enabled:
                error = self._check_enable(module, enabled_slugs)
            else:
                error = self._check_disable(module, enabled_slugs)

            if error is None:
                firm_module, changed = self._apply_toggle(firm, module, firm_module, enabled)

        if error is not None:
            self._reject(firm, module, error, {'enabled': enabled})

        if changed:
            signal = module_enabled if enabled else module_disabled
            signal.send(sender=FirmModule, firm=firm, module=module, user=self.user)
        return firm_module

    def _check_enable(self, module, enabled_slugs) -> Optional[ModuleError]:
        if module.slug in enabled_slugs:
            return None
        result = validate(module, enabled_slugs)
        if result.valid:
            return None
        return ModuleValidationError('; '.join(result.errors), result=result, module=module)

    def _check_disable(self, module, enabled_slugs) -> Optional[ModuleError]:
        if module.is_core:
            return ModuleStateError(f"{module.display_name} is a core module and cannot be disabled")

        active = list(Module.objects.active())
        dependents = find_dependents(
            module.slug,
            [ModuleRecord.from_module(m) for m in active],
            enabled_slugs,
        )
        if not dependents:
            return None

        names = {m.slug: m.display_name for m in active}
        return DependentModulesError(
            f"Cannot disable {module.display_name}: required by "
            f"{', '.join(names[slug] for slug in dependents)}",
            dependents=dependents,
        )

    def _apply_toggle(self, firm, module, firm_module, enabled: bool):
        if firm_module is None:
            if not enabled:
                return None, False
            firm_module = FirmModule(firm=firm, module=module)
        elif firm_module.is_enabled == enabled:
            return firm_module, False

        if enabled:
            firm_module.mark_enabled(self.user)
            firm_module.configuration = load_config(module.slug, firm_module.configuration).to_dict()
            event_type = ModuleEvent.EventType.ENABLED
        else:
            firm_module.mark_disabled(self.user)
            event_type = ModuleEvent.EventType.DISABLED

        firm_module.save()
        self._record_event(firm, module, event_type)
        self._log_operation(
            "toggle_firm_module",
            {'module': module.slug, 'enabled': enabled},
        )
        return firm_module, True

    def update_module_configuration(self, firm, module_slug: str, configuration: Any) -> FirmModule:
        """
        Merge ``configuration`` into an enabled module's stored configuration.

        Raises:
            ModulePermissionError: If the user is neither a firm member nor an
                admin or manager
            ModuleStateError: If the module is not enabled for the firm
            ModuleConfigurationError: If the result does not fit the module's schema
        """
        user = self._require_user()
        if (user.role not in CONFIGURATION_ROLES
                and not get_user_firm_access(user).can_access(firm)):
            raise ModulePermissionError("You do not have permission to configure modules for this firm")

        module = self._get_module(module_slug)
        firm_module = FirmModule.objects.filter(firm=firm, module=module, is_enabled=True).first()
        if firm_module is None:
            raise ModuleStateError(f"{module.display_name} is not enabled for this firm")

        # Validates the payload shape before merging
        parse_config(module.slug, configuration)

        merged = dict(load_config(module.slug, firm_module.configuration).to_dict())
        merged.update(configuration or {})
        firm_module.configuration = parse_config(module.slug, merged).to_dict()
        firm_module.save(update_fields=['configuration', 'updated_at'])

        changed = sorted((configuration or {}).keys())
        self._record_event(firm, module, ModuleEvent.EventType.CONFIGURED, {'changed': changed})
        self._log_operation("update_module_configuration", {'module': module.slug, 'changed': changed})

        module_configured.send(
            sender=FirmModule,
            firm=firm,
            module=module,
            user=self.user,
            configuration=firm_module.configuration,
        )
        return firm_module

    def get_available_modules(self) -> List[Module]:
        """Catalogue of active modules, by category then sort order."""
        self._require_user()
        return list(Module.objects.active().order_by('category', 'sort_order', 'display_name'))

    def get_user_module_permissions(self, firm) -> List[str]:
        """Permission keys granted to the user's role in ``firm``."""
        self._check_firm_access(firm)

        grants = (
            RoleModulePermission.objects
            .for_firm(firm)
            .filter(role=self.user.role)
            .select_related('permission__module')
        )
        keys = list(dict.fromkeys(grant.permission.key for grant in grants))

        if self.user.is_platform_admin:
            keys.extend(['admin', 'settings.modules.manage'])
        return keys

    def install_default_modules(self, firm) -> List[FirmModule]:
        """
        Enable every active core module for ``firm`` with its default configuration.

        Raises:
            ModuleError: If the catalogue has no core modules
        """
        user = self._require_user()
        if not user.is_platform_admin:
            raise ModulePermissionError("Only admins can install default modules")

        core_modules = list(Module.objects.core())
        if not core_modules:
            raise ModuleError("No core modules available")

        installed = []
        with transaction.atomic():
            for module in core_modules:
                firm_module, _ = FirmModule.objects.get_or_create(firm=firm, module=module)
                if not firm_module.is_enabled:
                    firm_module.mark_enabled(user)
                    firm_module.configuration = load_config(
                        module.slug, firm_module.configuration
                    ).to_dict()
                    firm_module.save()
                    self._record_event(firm, module, ModuleEvent.EventType.ENABLED, {'default': True})
                installed.append(firm_module)

        self._log_operation("install_default_modules", {'modules': [m.slug for m in core_modules]})
        return installed

    def get_module_analytics(self, firm, module_slug: str) -> Dict[str, Any]:
        """Usage summary of a module for a firm, from the module event log."""
        self._check_firm_access(firm)
        module = self._get_module(module_slug)

        events = ModuleEvent.objects.filter(firm=firm, module=module)
        summary = events.aggregate(
            event_count=Count('id'),
            last_event_at=Max('occurred_at'),
            user_count=Count('user', distinct=True),
        )
        by_type = dict(
            events.order_by()
            .values_list('event_type')
            .annotate(count=Count('id'))
        )

        return {
            'module': module.slug,
            'event_count': summary['event_count'],
            'last_event_at': summary['last_event_at'],
            'user_count': summary['user_count'],
            'events_by_type': by_type,
        }

    def get_module_events(self, firm, module_slug: Optional[str] = None, limit: int = 50) -> List[ModuleEvent]:
        """Most recent module events for ``firm``, optionally for one module."""
        self._check_firm_access(firm)

        events = (
            ModuleEvent.objects
            .filter(firm=firm)
            .select_related('module', 'user')
            .order_by('-occurred_at')
        )
        if module_slug:
            events = events.filter(module=self._get_module(module_slug, active_only=False))
        return list(events[:limit])

"""
Firm services.

Creating a firm validates the whole module selection up front: if any
selected module is missing a dependency or conflicts with another one,
nothing is written.
"""

from typing import Any, Dict, List

from django.conf import settings
from django.db import transaction

from senexus_core.accounts.access import get_user_accessible_firms, get_user_firm_access
from senexus_core.core.services import (
    BaseService,
    NotFoundServiceError,
    PermissionServiceError,
    ValidationServiceError,
)
from senexus_core.modules.configuration import default_config
from senexus_core.modules.exceptions import ModuleValidationError
from senexus_core.modules.models import FirmModule, Module
from senexus_core.modules.validation import validate_selection

from .models import Firm, SenexusGroup
from .signals import firm_created

FIRM_FIELDS = ['name', 'type', 'description', 'logo', 'theme_color']


class FirmService(BaseService):
    """Service for creating and maintaining firms"""

    def _require_admin(self, message: str) -> None:
        user = self._require_user()
        if not user.is_platform_admin:
            raise PermissionServiceError(message)

    def _get_group(self) -> SenexusGroup:
        name = getattr(settings, 'SENEXUS_GROUP_NAME', 'Senexus Group')
        try:
            return SenexusGroup.objects.get(name=name)
        except SenexusGroup.DoesNotExist:
            raise NotFoundServiceError(f"Senexus group '{name}' not found")

    def _resolve_modules(self, slugs: List[str]) -> List[Module]:
        """Selected modules in request order, with active core modules added first."""
        requested = list(dict.fromkeys(slugs or []))
        found = {m.slug: m for m in Module.objects.active().filter(slug__in=requested)}

        unknown = [slug for slug in requested if slug not in found]
        if unknown:
            raise ValidationServiceError(f"Unknown modules: {', '.join(unknown)}")

        core = [m for m in Module.objects.core() if m.slug not in found]
        return core + [found[slug] for slug in requested]

    def create_firm_with_modules(self, data: Dict[str, Any]) -> Firm:
        """
        Create a firm and enable the selected modules in one transaction.

        Active core modules are always enabled, ahead of the selection,
        whether or not the caller listed them.

        Args:
            data: firm fields plus ``selected_modules`` (module slugs)

        Returns:
            The new firm

        Raises:
            PermissionServiceError: If the acting user is not an admin
            ModuleValidationError: If the selection fails validation; carries
                the first failing module's result
        """
        self._require_admin("Only admins can create firms")
        self.validate_required_fields(data, ['name', 'type'])

        group = self._get_group()
        modules = self._resolve_modules(data.get('selected_modules'))

        failures = validate_selection(modules)
        if failures:
            module, result = failures[0]
            self._log_operation(
                "create_firm_rejected",
                {'name': data['name'], 'module': module.slug, 'errors': list(result.errors)},
                level='warning',
            )
            raise ModuleValidationError(
                f"Cannot enable {module.display_name}: {'; '.join(result.errors)}",
                result=result,
                module=module,
            )

        def _create():
            firm = Firm(senexus_group=group, is_active=True)
            for field in FIRM_FIELDS:
                if data.get(field) is not None:
                    setattr(firm, field, data[field])
            firm.full_clean(exclude=['slug'])
            firm.save()

            firm_modules = []
            for module in modules:
                firm_module = FirmModule(
                    firm=firm,
                    module=module,
                    configuration=default_config(module.slug).to_dict(),
                )
                firm_module.mark_enabled(self.user)
                firm_modules.append(firm_module)
            FirmModule.objects.bulk_create(firm_modules)
            return firm

        firm = self._execute_with_transaction(_create)

        self._log_operation(
            "create_firm",
            {'firm': firm.slug, 'modules': [m.slug for m in modules]},
        )
        transaction.on_commit(
            lambda: firm_created.send(sender=Firm, firm=firm, modules=modules, user=self.user)
        )
        return firm

    def list_user_firms(self):
        """Active firms the acting user can access, ordered by name"""
        return get_user_accessible_firms(self._require_user()).order_by('name')

    def get_firm_by_slug(self, slug: str) -> Firm:
        firm = Firm.objects.active().filter(slug=slug).first()
        if firm is None or not get_user_firm_access(self._require_user()).can_access(firm):
            raise NotFoundServiceError("Firm not found")
        return firm

    def update_firm(self, firm: Firm, data: Dict[str, Any]) -> Firm:
        """Admins can update any firm; other users only firms they belong to."""
        user = self._require_user()
        if not user.is_platform_admin and not get_user_firm_access(user).can_access(firm):
            raise PermissionServiceError("You do not have permission to update this firm")

        updates = {field: data.get(field) for field in FIRM_FIELDS}
        firm = self.safe_update(firm, **updates)
        self._log_operation("update_firm", {'firm': firm.slug})
        return firm

    def delete_firm(self, firm: Firm) -> Firm:
        """
        Soft-delete a firm.

        Raises:
            ValidationServiceError: If the firm still has active entities
        """
        self._require_admin("Only admins can delete firms")

        active_entities = firm.entities.filter(is_active=True).count()
        if active_entities:
            raise ValidationServiceError(
                f"Cannot delete a firm with active entities ({active_entities})"
            )

        firm.is_active = False
        firm.save(update_fields=['is_active', 'updated_at'])
        self._log_operation("delete_firm", {'firm': firm.slug})
        return firm


"""
Helpers for working with loaded module and firm-module records.
"""

from typing import Iterable, List, Optional, Sequence

from .validation import _slug_list


def is_module_enabled(firm_modules: Iterable['FirmModule'], module_slug: str) -> bool:
    """Check if a module is enabled in a list of firm modules."""
    return any(
        fm.is_enabled and fm.module.slug == module_slug
        for fm in firm_modules
    )


def get_enabled_modules(firm_modules: Iterable['FirmModule']) -> List['Module']:
    """Enabled modules, ordered by their catalogue sort order."""
    modules = [fm.module for fm in firm_modules if fm.is_enabled and fm.module_id]
    return sorted(modules, key=lambda m: m.sort_order or 0)


def permission_key(module_slug: str, action: str, resource: Optional[str] = None) -> str:
    if resource:
        return f"{module_slug}.{resource}.{action}"
    return f"{module_slug}.{action}"


def has_permission(user_permissions: Sequence[str],
                   module_slug: str,
                   action: str,
                   resource: Optional[str] = None) -> bool:
    """
    Check a permission key against the keys granted to a user.

    The ``admin`` key grants everything.
    """
    if 'admin' in user_permissions:
        return True
    return permission_key(module_slug, action, resource) in user_permissions


def get_missing_dependencies(module, enabled_slugs: Iterable[str]) -> List[str]:
    enabled = set(enabled_slugs)
    return [slug for slug in _slug_list(module, 'requires_modules') if slug not in enabled]


def sort_modules(modules: Iterable['Module']) -> List['Module']:
    """Core modules first, then by category, sort order and display name."""
    return sorted(
        modules,
        key=lambda m: (
            not m.is_core,
            m.category or 'other',
            m.sort_order or 999,
            m.display_name,
        ),
    )

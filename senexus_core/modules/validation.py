"""
Module dependency and conflict validation.

Pure functions used by the firm-creation and module-toggle workflows.
Nothing here touches the database: callers load the module records and
the firm's enabled slugs, and pass them in. Inputs may be ``Module``
instances, ``ModuleRecord`` values or plain mappings.

Only direct dependencies are checked. If A requires B and B requires C,
enabling A checks for B alone.
"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Sequence, Tuple


MISSING_DEPENDENCIES_MESSAGE = "Missing required modules: {}"
CONFLICTS_MESSAGE = "Conflicts with enabled modules: {}"


@dataclass(frozen=True)
class ModuleRecord:
    """The subset of a module definition the validator reads."""
    slug: str
    display_name: str = ''
    is_core: bool = False
    requires_modules: Tuple[str, ...] = ()
    conflicts_with: Tuple[str, ...] = ()

    @classmethod
    def from_module(cls, module: Any) -> 'ModuleRecord':
        """Build a record from a model instance or mapping."""
        return cls(
            slug=_read(module, 'slug') or '',
            display_name=_read(module, 'display_name') or '',
            is_core=bool(_read(module, 'is_core')),
            requires_modules=tuple(_slug_list(module, 'requires_modules')),
            conflicts_with=tuple(_slug_list(module, 'conflicts_with')),
        )


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one module against an enabled set."""
    valid: bool
    missing_dependencies: Tuple[str, ...] = ()
    conflicting_modules: Tuple[str, ...] = ()
    errors: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            'valid': self.valid,
            'missing_dependencies': list(self.missing_dependencies),
            'conflicting_modules': list(self.conflicting_modules),
            'errors': list(self.errors),
        }


def _read(module: Any, name: str) -> Any:
    if isinstance(module, Mapping):
        return module.get(name)
    return getattr(module, name, None)


def _slug_list(module: Any, name: str) -> List[str]:
    value = _read(module, name)
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [slug for slug in value if slug]


def validate(candidate: Any, enabled_slugs: Iterable[str]) -> ValidationResult:
    """
    Decide whether ``candidate`` may be enabled next to ``enabled_slugs``.

    Args:
        candidate: Module record with ``requires_modules`` and ``conflicts_with``
            slug lists; missing or null lists count as empty
        enabled_slugs: Slugs currently enabled for the firm. The candidate
            itself does not need to be included.

    Returns:
        ValidationResult listing missing dependencies and conflicts in the
        order the candidate declares them, plus one error message per
        violated category.
    """
    enabled = set(enabled_slugs or ())

    missing = tuple(
        slug for slug in _slug_list(candidate, 'requires_modules')
        if slug not in enabled
    )
    conflicts = tuple(
        slug for slug in _slug_list(candidate, 'conflicts_with')
        if slug in enabled
    )

    errors = []
    if missing:
        errors.append(MISSING_DEPENDENCIES_MESSAGE.format(', '.join(missing)))
    if conflicts:
        errors.append(CONFLICTS_MESSAGE.format(', '.join(conflicts)))

    return ValidationResult(
        valid=not missing and not conflicts,
        missing_dependencies=missing,
        conflicting_modules=conflicts,
        errors=tuple(errors),
    )


def find_dependents(candidate_slug: str,
                    all_modules: Iterable[Any],
                    enabled_slugs: Iterable[str]) -> List[str]:
    """
    Return the enabled modules that list ``candidate_slug`` as a requirement.

    A non-empty result means ``candidate_slug`` cannot be disabled.
    Order follows ``all_modules``; the candidate itself is never reported.
    """
    enabled = set(enabled_slugs or ())
    dependents = []

    for module in all_modules:
        slug = _read(module, 'slug')
        if not slug or slug == candidate_slug or slug not in enabled:
            continue
        if candidate_slug in _slug_list(module, 'requires_modules'):
            dependents.append(slug)

    return dependents


def validate_selection(modules: Sequence[Any]) -> List[Tuple[Any, ValidationResult]]:
    """
    Validate a batch of modules that would be enabled together.

    Each module is checked against the slugs of every *other* module in
    the selection. Returns ``(module, result)`` pairs for the failures,
    in selection order; an empty list means the whole batch is valid.
    """
    slugs = [_read(module, 'slug') for module in modules]
    failures = []

    for index, module in enumerate(modules):
        others = [slug for i, slug in enumerate(slugs) if i != index and slug]
        result = validate(module, others)
        if not result.valid:
            failures.append((module, result))

    return failures

"""
Firm access resolution.

A user can reach their primary firm and every firm they hold an active
assignment for. Admins and owners can reach every active firm.
"""

from dataclasses import dataclass, asdict
from typing import Optional, Tuple

from senexus_core.firms.models import Firm

from .cache import profile_cache


@dataclass(frozen=True)
class UserFirmAccess:
    user_id: Optional[str] = None
    role: Optional[str] = None
    primary_firm_id: Optional[str] = None
    assigned_firm_ids: Tuple[str, ...] = ()
    default_firm_slug: Optional[str] = None
    can_access_all_firms: bool = False

    def can_access(self, firm) -> bool:
        if firm is None or not firm.is_active:
            return False
        return self.can_access_all_firms or str(firm.pk) in self.assigned_firm_ids

    def to_dict(self) -> dict:
        data = asdict(self)
        data['assigned_firm_ids'] = list(self.assigned_firm_ids)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'UserFirmAccess':
        data = dict(data)
        data['assigned_firm_ids'] = tuple(data.get('assigned_firm_ids') or ())
        return cls(**data)


NO_ACCESS = UserFirmAccess()


def _compute_access(user) -> UserFirmAccess:
    firm_ids = list(
        user.firm_assignments
        .filter(is_active=True, firm__is_active=True)
        .order_by('firm__name')
        .values_list('firm_id', 'firm__slug')
    )

    primary = user.firm if user.firm_id and user.firm.is_active else None
    assigned = [str(firm_id) for firm_id, _ in firm_ids]
    if primary is not None and str(primary.pk) not in assigned:
        assigned.insert(0, str(primary.pk))

    if primary is not None:
        default_slug = primary.slug
    elif firm_ids:
        default_slug = firm_ids[0][1]
    elif user.can_access_all_firms:
        default_slug = Firm.objects.active().values_list('slug', flat=True).first()
    else:
        default_slug = None

    return UserFirmAccess(
        user_id=str(user.pk),
        role=user.role,
        primary_firm_id=str(primary.pk) if primary is not None else None,
        assigned_firm_ids=tuple(assigned),
        default_firm_slug=default_slug,
        can_access_all_firms=user.can_access_all_firms,
    )


def get_user_firm_access(user, cache=None) -> UserFirmAccess:
    """
    Return the firms ``user`` can reach, using the profile cache.

    Inactive or anonymous users get no access.
    """
    if user is None or not user.is_authenticated or not user.is_active:
        return NO_ACCESS

    cache = cache or profile_cache
    cached = cache.get(user.pk)
    if cached is not None:
        return UserFirmAccess.from_dict(cached)

    access = _compute_access(user)
    cache.set(user.pk, access.to_dict())
    return access


def check_user_firm_access(user, firm_slug: str, cache=None) -> bool:
    """Whether ``user`` may access the active firm with ``firm_slug``."""
    firm = Firm.objects.active().filter(slug=firm_slug).first()
    if firm is None:
        return False
    return get_user_firm_access(user, cache=cache).can_access(firm)


def get_user_accessible_firms(user, cache=None):
    """Active firms ``user`` may access, ordered by name."""
    access = get_user_firm_access(user, cache=cache)
    firms = Firm.objects.active().select_related('senexus_group')
    if access.can_access_all_firms:
        return firms
    return firms.filter(pk__in=access.assigned_firm_ids)

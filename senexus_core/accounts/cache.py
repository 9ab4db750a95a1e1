"""
Profile cache

Caches each user's computed firm access so permission checks do not
query assignments on every request. Entries expire after
``PROFILE_CACHE_TTL`` seconds and are dropped explicitly whenever a user
or one of their firm assignments is saved or deleted (see ``signals``).
"""

import logging
from typing import Any, Optional

from django.conf import settings
from django.core.cache import cache as django_cache

logger = logging.getLogger(__name__)

DEFAULT_TTL = 300


class ProfileCache:
    """
    Thin wrapper around a Django cache backend.

    The backend is injectable so tests can pass an isolated ``LocMemCache``.
    """

    key_prefix = 'senexus:profile'

    def __init__(self, backend=None, ttl: Optional[int] = None):
        self.backend = backend if backend is not None else django_cache
        self.ttl = ttl if ttl is not None else getattr(settings, 'PROFILE_CACHE_TTL', DEFAULT_TTL)

    def make_key(self, user_id: Any) -> str:
        return f"{self.key_prefix}:{user_id}"

    def get(self, user_id: Any) -> Optional[dict]:
        try:
            return self.backend.get(self.make_key(user_id))
        except Exception as e:
            logger.error(f"Profile cache get error: {e}")
            return None

    def set(self, user_id: Any, value: dict) -> None:
        try:
            self.backend.set(self.make_key(user_id), value, self.ttl)
        except Exception as e:
            logger.error(f"Profile cache set error: {e}")

    def invalidate(self, user_id: Any) -> None:
        try:
            self.backend.delete(self.make_key(user_id))
            logger.debug(f"Invalidated profile cache for user {user_id}")
        except Exception as e:
            logger.error(f"Profile cache delete error: {e}")


profile_cache = ProfileCache()

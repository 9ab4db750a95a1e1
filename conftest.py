"""
Pytest hooks shared by every test suite.
"""

import pytest

from senexus_core.accounts.cache import profile_cache


@pytest.fixture(autouse=True)
def clear_profile_cache():
    """Cached user profiles must not leak between tests."""
    yield
    profile_cache.backend.clear()

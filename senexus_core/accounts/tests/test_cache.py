"""
Tests for the profile cache
"""

from unittest.mock import Mock

from django.core.cache.backends.locmem import LocMemCache
from django.test import SimpleTestCase

from senexus_core.accounts.cache import ProfileCache, profile_cache


class ProfileCacheTestCase(SimpleTestCase):

    def setUp(self):
        self.backend = LocMemCache('profile-tests', {})
        self.cache = ProfileCache(backend=self.backend, ttl=60)
        self.addCleanup(self.backend.clear)

    def test_set_and_get(self):
        self.cache.set('abc', {'role': 'user'})

        self.assertEqual(self.cache.get('abc'), {'role': 'user'})
        self.assertEqual(self.backend.get('senexus:profile:abc'), {'role': 'user'})

    def test_get_missing(self):
        self.assertIsNone(self.cache.get('missing'))

    def test_invalidate(self):
        self.cache.set('abc', {'role': 'user'})

        self.cache.invalidate('abc')

        self.assertIsNone(self.cache.get('abc'))

    def test_ttl_passed_to_backend(self):
        backend = Mock()
        cache = ProfileCache(backend=backend, ttl=15)

        cache.set('abc', {})

        backend.set.assert_called_once_with('senexus:profile:abc', {}, 15)

    def test_default_ttl_from_settings(self):
        with self.settings(PROFILE_CACHE_TTL=42):
            self.assertEqual(ProfileCache(backend=self.backend).ttl, 42)

    def test_backend_errors_are_logged_not_raised(self):
        backend = Mock()
        backend.get.side_effect = ConnectionError('down')
        backend.set.side_effect = ConnectionError('down')
        backend.delete.side_effect = ConnectionError('down')
        cache = ProfileCache(backend=backend)

        with self.assertLogs('senexus_core.accounts.cache', level='ERROR') as logs:
            self.assertIsNone(cache.get('abc'))
            cache.set('abc', {})
            cache.invalidate('abc')

        self.assertEqual(len(logs.records), 3)


class SharedProfileCacheIsolationTestCase(SimpleTestCase):
    """Each test writes the same entry; whichever runs second must start clean."""

    def write_shared_entry(self):
        self.assertIsNone(profile_cache.get('shared'))
        profile_cache.set('shared', {'role': 'user'})

    def test_first_write(self):
        self.write_shared_entry()

    def test_second_write(self):
        self.write_shared_entry()

"""
Account signal handlers

Firm access is cached per user; any change to the user row or to one of
their firm assignments drops the cached entry. Logins stamp
``last_login_at``.
"""

from django.contrib.auth.signals import user_logged_in
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from .cache import profile_cache
from .models import User, UserFirmAssignment
from .services import UserService


@receiver(post_save, sender=User)
@receiver(post_delete, sender=User)
def invalidate_user_profile(sender, instance, **kwargs):
    profile_cache.invalidate(instance.pk)


@receiver(post_save, sender=UserFirmAssignment)
@receiver(post_delete, sender=UserFirmAssignment)
def invalidate_assignment_profile(sender, instance, **kwargs):
    profile_cache.invalidate(instance.user_id)


@receiver(user_logged_in)
def record_last_login(sender, request, user, **kwargs):
    UserService.update_last_login(user)

from django.apps import AppConfig


class AccountsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'senexus_core.accounts'
    verbose_name = 'Accounts'

    def ready(self):
        # Import signal handlers
        from . import signals  # noqa: F401

from django.apps import AppConfig


class ModulesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'senexus_core.modules'
    verbose_name = 'Firm Modules'

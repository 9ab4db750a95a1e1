"""
Seed the module catalogue and the Senexus group
"""
from django.conf import settings
from django.core.management.base import BaseCommand
from django.db import transaction

from senexus_core.firms.models import SenexusGroup
from senexus_core.modules.catalogue import CATEGORY_COLORS, DEFAULT_CATALOGUE
from senexus_core.modules.models import Module


class Command(BaseCommand):
    help = 'Load the default module catalogue'

    def add_arguments(self, parser):
        parser.add_argument(
            '--update',
            action='store_true',
            help='Overwrite existing module definitions with the defaults',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        group_name = getattr(settings, 'SENEXUS_GROUP_NAME', 'Senexus Group')
        group, created = SenexusGroup.objects.get_or_create(name=group_name)
        if created:
            self.stdout.write(self.style.SUCCESS(f'Created group: {group.name}'))

        self.stdout.write('Loading default modules...')

        for module_data in DEFAULT_CATALOGUE:
            defaults = dict(module_data)
            slug = defaults.pop('slug')
            defaults.setdefault('color', CATEGORY_COLORS.get(defaults.get('category'), ''))

            if options['update']:
                module, created = Module.objects.update_or_create(slug=slug, defaults=defaults)
            else:
                module, created = Module.objects.get_or_create(slug=slug, defaults=defaults)

            if created:
                self.stdout.write(self.style.SUCCESS(f'Created module: {module.slug}'))
            elif options['update']:
                self.stdout.write(f'Updated module: {module.slug}')
            else:
                self.stdout.write(f'Module already exists: {module.slug}')

        self.stdout.write(self.style.SUCCESS('Module catalogue ready!'))

# Generated manually for modules app

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('firms', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Module',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('slug', models.CharField(help_text='Unique identifier for the module (e.g., health_insurance)', max_length=100, unique=True)),
                ('display_name', models.CharField(help_text='Human-readable module name', max_length=200)),
                ('description', models.TextField(blank=True)),
                ('icon', models.CharField(blank=True, max_length=100)),
                ('color', models.CharField(blank=True, max_length=7)),
                ('category', models.CharField(choices=[('core', 'System'), ('business', 'Business'), ('health', 'Health'), ('communication', 'Communication'), ('analytics', 'Analytics')], default='business', max_length=20)),
                ('pricing_tier', models.CharField(choices=[('free', 'Free'), ('basic', 'Basic'), ('premium', 'Premium'), ('enterprise', 'Enterprise')], default='free', max_length=20)),
                ('is_core', models.BooleanField(default=False, help_text='Core modules are enabled for every firm and cannot be disabled')),
                ('is_active', models.BooleanField(default=True, help_text='Whether this module is available in the catalogue')),
                ('sort_order', models.PositiveIntegerField(default=0)),
                ('requires_modules', models.JSONField(blank=True, default=list, help_text='Slugs of modules that must be enabled first')),
                ('conflicts_with', models.JSONField(blank=True, default=list, help_text='Slugs of modules that cannot be enabled alongside this one')),
            ],
            options={
                'db_table': 'modules',
                'ordering': ['sort_order', 'display_name'],
                'indexes': [models.Index(fields=['is_active', 'category'], name='modules_active_category_idx')],
            },
        ),
        migrations.CreateModel(
            name='FirmModule',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('is_enabled', models.BooleanField(default=False)),
                ('configuration', models.JSONField(blank=True, default=dict, help_text='Module configuration specific to this firm')),
                ('enabled_at', models.DateTimeField(blank=True, null=True)),
                ('disabled_at', models.DateTimeField(blank=True, null=True)),
                ('disabled_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('enabled_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('firm', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='firm_modules', to='firms.firm')),
                ('module', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='firm_modules', to='modules.module')),
            ],
            options={
                'db_table': 'firm_modules',
                'unique_together': {('firm', 'module')},
                'indexes': [models.Index(fields=['firm', 'is_enabled'], name='firm_modules_firm_enabled_idx')],
            },
        ),
        migrations.CreateModel(
            name='ModulePermission',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('resource', models.CharField(blank=True, max_length=100)),
                ('action', models.CharField(choices=[('create', 'Create'), ('read', 'Read'), ('update', 'Update'), ('delete', 'Delete'), ('sign', 'Sign'), ('generate', 'Generate'), ('approve', 'Approve'), ('process', 'Process'), ('manage', 'Manage')], max_length=20)),
                ('scope', models.CharField(choices=[('global', 'Global'), ('firm', 'Firm'), ('entity', 'Entity'), ('self', 'Self')], default='firm', max_length=20)),
                ('description', models.TextField(blank=True)),
                ('module', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='permissions', to='modules.module')),
            ],
            options={
                'db_table': 'module_permissions',
                'unique_together': {('module', 'resource', 'action')},
            },
        ),
        migrations.CreateModel(
            name='RoleModulePermission',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('role', models.CharField(max_length=20)),
                ('firm', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='role_module_permissions', to='firms.firm')),
                ('permission', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='role_grants', to='modules.modulepermission')),
            ],
            options={
                'db_table': 'role_module_permissions',
                'unique_together': {('firm', 'role', 'permission')},
            },
        ),
        migrations.CreateModel(
            name='ModuleEvent',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('event_type', models.CharField(choices=[('module.enabled', 'Module Enabled'), ('module.disabled', 'Module Disabled'), ('module.configured', 'Module Configured'), ('module.rejected', 'Change Rejected')], max_length=50)),
                ('event_data', models.JSONField(blank=True, default=dict)),
                ('occurred_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('firm', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='module_events', to='firms.firm')),
                ('module', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='events', to='modules.module')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'module_events',
                'ordering': ['-occurred_at'],
                'indexes': [
                    models.Index(fields=['module', 'event_type', '-occurred_at'], name='module_events_module_type_idx'),
                    models.Index(fields=['firm', '-occurred_at'], name='module_events_firm_time_idx'),
                ],
            },
        ),
    ]

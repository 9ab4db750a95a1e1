from django.contrib import admin

from .models import Entity, Firm, SenexusGroup


@admin.register(SenexusGroup)
class SenexusGroupAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']


class EntityInline(admin.TabularInline):
    model = Entity
    extra = 0
    fields = ['name', 'industry', 'contact_email', 'is_active']


@admin.register(Firm)
class FirmAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'type', 'senexus_group', 'is_active', 'created_at']
    list_filter = ['is_active', 'type']
    search_fields = ['name', 'slug']
    readonly_fields = ['slug', 'created_at', 'updated_at']
    inlines = [EntityInline]


@admin.register(Entity)
class EntityAdmin(admin.ModelAdmin):
    list_display = ['name', 'firm', 'industry', 'is_active']
    list_filter = ['is_active', 'industry']
    search_fields = ['name', 'firm__name']
    raw_id_fields = ['firm']

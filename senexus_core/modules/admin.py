"""
Module System Admin Configuration
"""

from django.contrib import admin
from django.utils.html import format_html

from .models import FirmModule, Module, ModuleEvent, ModulePermission, RoleModulePermission


@admin.register(Module)
class ModuleAdmin(admin.ModelAdmin):
    list_display = [
        'slug', 'display_name', 'category', 'pricing_tier',
        'is_core', 'is_active_badge', 'sort_order'
    ]
    list_filter = ['category', 'pricing_tier', 'is_core', 'is_active']
    search_fields = ['slug', 'display_name', 'description']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['sort_order', 'display_name']

    fieldsets = (
        ('Basic Information', {
            'fields': ('slug', 'display_name', 'description', 'icon', 'color')
        }),
        ('Catalogue', {
            'fields': ('category', 'pricing_tier', 'is_core', 'is_active', 'sort_order')
        }),
        ('Dependencies', {
            'fields': ('requires_modules', 'conflicts_with')
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        })
    )

    def is_active_badge(self, obj):
        if obj.is_active:
            return format_html('<span style="color: green;">Active</span>')
        return format_html('<span style="color: gray;">Retired</span>')
    is_active_badge.short_description = 'Status'


@admin.register(FirmModule)
class FirmModuleAdmin(admin.ModelAdmin):
    list_display = ['firm', 'module', 'is_enabled', 'enabled_at', 'disabled_at']
    list_filter = ['is_enabled', 'module']
    search_fields = ['firm__name', 'module__slug']
    readonly_fields = ['enabled_at', 'enabled_by', 'disabled_at', 'disabled_by', 'created_at', 'updated_at']
    raw_id_fields = ['firm', 'module']


@admin.register(ModulePermission)
class ModulePermissionAdmin(admin.ModelAdmin):
    list_display = ['key', 'module', 'resource', 'action', 'scope']
    list_filter = ['action', 'scope', 'module']
    search_fields = ['module__slug', 'resource']


@admin.register(RoleModulePermission)
class RoleModulePermissionAdmin(admin.ModelAdmin):
    list_display = ['firm', 'role', 'permission']
    list_filter = ['role']
    raw_id_fields = ['firm', 'permission']


@admin.register(ModuleEvent)
class ModuleEventAdmin(admin.ModelAdmin):
    list_display = ['event_type', 'module', 'firm', 'user', 'occurred_at']
    list_filter = ['event_type', 'occurred_at']
    search_fields = ['module__slug', 'firm__name']
    readonly_fields = ['firm', 'module', 'event_type', 'event_data', 'user', 'occurred_at']
    date_hierarchy = 'occurred_at'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

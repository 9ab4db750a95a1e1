from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User, UserFirmAssignment


class UserFirmAssignmentInline(admin.TabularInline):
    model = UserFirmAssignment
    fk_name = 'user'
    extra = 0
    fields = ['firm', 'is_active', 'assigned_at']
    readonly_fields = ['assigned_at']


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['email', 'full_name', 'role', 'firm', 'is_active', 'last_login_at']
    list_filter = ['role', 'is_active']
    search_fields = ['email', 'full_name']
    ordering = ['email']
    inlines = [UserFirmAssignmentInline]

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Platform', {
            'fields': (
                'role', 'full_name', 'phone', 'position', 'department',
                'hire_date', 'firm', 'last_login_at'
            )
        }),
    )

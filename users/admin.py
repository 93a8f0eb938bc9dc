"""
Admin configuration for accounts
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('id', 'email', 'name', 'role', 'is_blocked', 'created_at')
    list_filter = ('role', 'is_blocked', 'created_at')
    search_fields = ('email', 'name')
    ordering = ('-created_at',)
    readonly_fields = ('created_at', 'updated_at', 'last_login')
    filter_horizontal = ('favorites',)
    fieldsets = (
        ('Account', {
            'fields': ('email', 'password', 'name', 'role', 'is_blocked')
        }),
        ('Profile', {
            'fields': ('profile_image_url', 'body_gender', 'body_height_cm', 'body_type', 'favorites')
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser'),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('last_login', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'name', 'role', 'password1', 'password2'),
        }),
    )

"""
Accounts Admin - Admin configuration for marketplace users.
"""

from django.contrib import admin

from .models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ['email', 'name', 'role', 'is_active', 'is_staff', 'date_joined']
    list_filter = ['role', 'is_active', 'is_staff']
    search_fields = ['email', 'name']
    ordering = ['-date_joined']
    readonly_fields = ['id', 'password', 'date_joined', 'updated_at', 'last_login']
    exclude = ['groups', 'user_permissions']

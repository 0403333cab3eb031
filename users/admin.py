"""
Users — Django Admin Configuration

Admin panel for User, Role and UserRole.

@file users/admin.py
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _

from .models import Role, User, UserRole


class UserRoleInline(admin.TabularInline):
    model = UserRole
    fk_name = 'user'
    extra = 0
    readonly_fields = ('created_at',)
    raw_id_fields = ('role',)
    fields = ('role', 'is_active', 'created_at')


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Phone-keyed user admin with inline role management."""

    list_display = (
        'phone', 'get_full_name', 'email', 'roles_display',
        'is_active', 'is_staff', 'date_joined',
    )
    list_filter = ('is_active', 'is_staff', 'is_superuser', 'user_roles__role')
    search_fields = ('phone', 'email', 'first_name', 'last_name')
    readonly_fields = (
        'id', 'created_at', 'updated_at', 'created_by', 'updated_by',
        'date_joined', 'last_login',
    )
    date_hierarchy = 'created_at'
    show_full_result_count = False
    list_per_page = 30
    ordering = ('-created_at',)
    inlines = [UserRoleInline]

    fieldsets = (
        (None, {
            'fields': ('id', 'phone', 'password'),
        }),
        (_('Personal Info'), {
            'fields': ('first_name', 'last_name', 'email'),
        }),
        (_('Permissions'), {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
        }),
        (_('Audit'), {
            'fields': ('date_joined', 'last_login', 'created_at', 'updated_at', 'created_by', 'updated_by'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('phone', 'password1', 'password2', 'first_name', 'last_name'),
        }),
    )

    @admin.display(description=_('Full Name'))
    def get_full_name(self, obj):
        return obj.get_full_name()

    @admin.display(description=_('Roles'))
    def roles_display(self, obj):
        return ', '.join(obj.role_names) or '—'


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ('name', 'is_system', 'description', 'created_at')
    list_filter = ('is_system',)
    search_fields = ('name', 'description')
    readonly_fields = ('id', 'created_at', 'updated_at', 'created_by', 'updated_by')
    list_per_page = 50

    def has_delete_permission(self, request, obj=None):
        if obj is not None and obj.is_system:
            return False
        return super().has_delete_permission(request, obj)


@admin.register(UserRole)
class UserRoleAdmin(admin.ModelAdmin):
    list_display = ('user', 'role', 'is_active', 'created_at')
    list_filter = ('is_active', 'role')
    search_fields = ('user__phone', 'user__email', 'role__name')
    readonly_fields = ('id', 'created_at', 'updated_at', 'created_by', 'updated_by')
    raw_id_fields = ('user', 'role')
    list_select_related = ('user', 'role')
    list_per_page = 50

"""
Core — Django Admin Configuration

Audit trail viewer. Entries are written by services and signals only,
so the admin never adds, edits or removes them.

@file core/admin.py
"""

from django.contrib import admin
from django.urls import NoReverseMatch, reverse
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from core.models import AuditLog

ACTION_COLORS = {
    AuditLog.ActionChoices.CREATE: '#22c55e',
    AuditLog.ActionChoices.UPDATE: '#3b82f6',
    AuditLog.ActionChoices.DELETE: '#ef4444',
    AuditLog.ActionChoices.ARCHIVE: '#f97316',
    AuditLog.ActionChoices.RECONCILE: '#eab308',
    AuditLog.ActionChoices.LOGIN: '#06b6d4',
    AuditLog.ActionChoices.LOGOUT: '#6b7280',
    AuditLog.ActionChoices.LOGIN_FAILED: '#dc2626',
}

# model_name stored on the entry -> admin change view of the target
TARGET_ADMIN_URLS = {
    'Product': 'admin:inventory_product_change',
    'User': 'admin:users_user_change',
}


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ('timestamp', 'action_badge', 'model_name', 'target_link', 'actor', 'ip_address')
    list_filter = ('action', 'model_name', 'timestamp')
    search_fields = ('object_id', 'actor__phone', 'actor__email')
    date_hierarchy = 'timestamp'
    list_select_related = ('actor',)
    show_full_result_count = False
    list_per_page = 50
    ordering = ('-timestamp',)

    fieldsets = (
        (_('Event'), {
            'fields': ('action', 'timestamp', 'actor', 'ip_address', 'user_agent'),
        }),
        (_('Target'), {
            'fields': ('model_name', 'object_id', 'target_link'),
        }),
        (_('Changes'), {
            'fields': ('old_values', 'new_values'),
        }),
    )

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields] + ['target_link']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.display(description=_('Action'), ordering='action')
    def action_badge(self, obj):
        return format_html(
            '<span style="background:{}; color:#fff; padding:2px 8px; '
            'border-radius:4px; font-size:11px; font-weight:600;">{}</span>',
            ACTION_COLORS.get(obj.action, '#6b7280'), obj.get_action_display(),
        )

    @admin.display(description=_('Object'))
    def target_link(self, obj):
        url_name = TARGET_ADMIN_URLS.get(obj.model_name)
        if url_name is None or obj.action == AuditLog.ActionChoices.DELETE:
            return obj.object_id
        try:
            url = reverse(url_name, args=[obj.object_id])
        except NoReverseMatch:
            return obj.object_id
        return format_html('<a href="{}">{}</a>', url, obj.object_id)

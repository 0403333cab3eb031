"""
Inventory — Django Admin Configuration

Product admin with stock badge, read-only ledger inline and an archive
action; movements are visible but never editable.

@file inventory/admin.py
"""

from django.contrib import admin, messages
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from .models import InventoryMovement, Product
from .services import ProductService

MOVEMENT_COLORS = {
    'in': '#22c55e',
    'out': '#ef4444',
    'adjustment': '#eab308',
}


class InventoryMovementInline(admin.TabularInline):
    model = InventoryMovement
    fk_name = 'product'
    extra = 0
    can_delete = False
    ordering = ('-sequence',)
    fields = (
        'sequence', 'movement_type', 'quantity',
        'previous_quantity', 'new_quantity', 'reason', 'created_by', 'created_at',
    )
    readonly_fields = fields
    show_change_link = True

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        'name', 'sku', 'barcode', 'category', 'brand',
        'stock_badge', 'unit_price', 'is_manual_entry', 'is_active', 'created_at',
    )
    list_filter = ('is_active', 'is_manual_entry', 'category', 'brand')
    search_fields = ('name', 'sku', 'barcode', 'description')
    readonly_fields = (
        'id', 'sku', 'quantity', 'ledger_version', 'symbol_image', 'images',
        'created_at', 'updated_at', 'created_by', 'updated_by',
    )
    date_hierarchy = 'created_at'
    list_select_related = ('created_by',)
    show_full_result_count = False
    list_per_page = 50
    ordering = ('-created_at',)
    inlines = [InventoryMovementInline]
    actions = ['archive_or_delete']

    fieldsets = (
        (_('Identification'), {
            'fields': ('id', 'sku', 'barcode', 'is_manual_entry', 'symbol_image'),
        }),
        (_('Description'), {
            'fields': ('name', 'description', 'category', 'brand', 'unit', 'unit_price', 'images'),
        }),
        (_('Stock'), {
            'fields': ('quantity', 'ledger_version', 'is_active'),
        }),
        (_('Audit'), {
            'fields': ('created_at', 'updated_at', 'created_by', 'updated_by'),
            'classes': ('collapse',),
        }),
    )

    def has_add_permission(self, request):
        # Creation goes through the API so opening stock lands in the ledger.
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def save_model(self, request, obj, form, change):
        obj.updated_by = request.user
        obj._current_user = request.user
        super().save_model(request, obj, form, change)

    @admin.display(description=_('Stock'), ordering='quantity')
    def stock_badge(self, obj):
        color = '#ef4444' if obj.quantity == 0 else '#22c55e'
        return format_html(
            '<span style="background:{}; color:#fff; padding:2px 8px; '
            'border-radius:4px; font-size:11px; font-weight:600;">{} {}</span>',
            color, obj.quantity, obj.unit,
        )

    @admin.action(description=_('Archive (or delete if never moved)'))
    def archive_or_delete(self, request, queryset):
        outcomes = {'archived': 0, 'deleted': 0}
        for product in queryset:
            outcomes[ProductService.delete_product(product_id=product.pk, actor=request.user)] += 1
        self.message_user(
            request,
            _('%(archived)d archived, %(deleted)d deleted.') % outcomes,
            messages.SUCCESS,
        )


@admin.register(InventoryMovement)
class InventoryMovementAdmin(admin.ModelAdmin):
    """Read-only ledger viewer."""

    list_display = (
        'created_at', 'product', 'type_badge', 'quantity',
        'previous_quantity', 'new_quantity', 'sequence', 'created_by',
    )
    list_filter = ('movement_type', 'created_at')
    search_fields = ('product__name', 'product__sku', 'reason', 'reference_number')
    date_hierarchy = 'created_at'
    list_select_related = ('product', 'created_by')
    show_full_result_count = False
    list_per_page = 50
    ordering = ('-created_at',)

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.display(description=_('Type'))
    def type_badge(self, obj):
        color = MOVEMENT_COLORS.get(obj.movement_type, '#6b7280')
        return format_html(
            '<span style="background:{}; color:#fff; padding:2px 8px; '
            'border-radius:4px; font-size:11px; font-weight:600;">{}</span>',
            color, obj.get_movement_type_display(),
        )

"""
Inventory — Models

Single-location stock ledger. ``Product.quantity`` is a materialised
counter owned by the ledger (``LedgerService.apply_movement``); every change
to it is backed by one insert-only ``InventoryMovement`` row whose
previous/new quantities chain exactly to the row before it.

@file inventory/models.py
"""

import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import ArchivableMixin, BaseModel

# Written only through the ledger (queryset CAS update), never through save().
LEDGER_FIELDS = frozenset({'quantity', 'ledger_version'})


def normalize_name(value: str) -> str:
    """Collapse whitespace and case so 'Widget ' and 'widget' group together."""
    return ' '.join((value or '').split()).casefold()


class Product(BaseModel, ArchivableMixin):
    """
    A catalog row. Manual bulk entry creates one row per physical unit;
    rows sharing a normalised name are reconciled at read time
    (``ProductService.list_grouped_by_name``).
    """

    sku = models.CharField(
        _('SKU'), max_length=64, unique=True,
        help_text=_('Globally unique, immutable after creation (archived rows included)'),
    )
    name = models.CharField(_('name'), max_length=255, db_index=True)
    description = models.TextField(_('description'), blank=True)
    category = models.CharField(_('category'), max_length=120, blank=True, db_index=True)
    brand = models.CharField(_('brand'), max_length=120, blank=True, db_index=True)
    unit = models.CharField(_('unit'), max_length=20, default='pcs')
    unit_price = models.DecimalField(
        _('unit price'), max_digits=12, decimal_places=2,
        null=True, blank=True,
        validators=[MinValueValidator(0)],
    )
    quantity = models.IntegerField(
        _('quantity'), default=0, editable=False,
        help_text=_('Materialised stock level; mutated only by the movement ledger'),
    )
    ledger_version = models.PositiveIntegerField(
        _('ledger version'), default=0, editable=False,
        help_text=_('Number of movements applied; optimistic concurrency token'),
    )
    barcode = models.CharField(
        _('barcode'), max_length=128, unique=True,
        null=True, blank=True,
        help_text=_('Physically printed code; distinct from the generated symbol'),
    )
    is_manual_entry = models.BooleanField(_('manual entry'), default=False)
    symbol_image = models.ImageField(
        _('symbol image'), upload_to='inventory_symbols/%Y/%m/',
        null=True, blank=True,
        help_text=_('Generated scannable symbol; manual entries only'),
    )
    images = models.JSONField(
        _('images'), default=list, blank=True,
        help_text=_('Storage references of product photos'),
    )

    class Meta:
        db_table = 'inventory_products'
        verbose_name = _('product')
        verbose_name_plural = _('products')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['is_active', 'name'], name='inv_product_active_name_idx'),
            models.Index(fields=['is_active', 'category'], name='inv_product_active_cat_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=0),
                name='inventory_product_quantity_non_negative',
            ),
        ]

    def __str__(self):
        return f'{self.name} ({self.sku})'

    @property
    def group_key(self) -> str:
        return normalize_name(self.name)

    def save(self, *args, **kwargs):
        if self._state.adding:
            if self.quantity or self.ledger_version:
                raise ValueError(
                    'Products are created empty; post opening stock through the ledger.',
                )
        else:
            update_fields = kwargs.get('update_fields')
            if update_fields is None:
                kwargs['update_fields'] = [
                    f.name for f in self._meta.concrete_fields
                    if not f.primary_key and f.name not in LEDGER_FIELDS
                ]
            elif LEDGER_FIELDS.intersection(update_fields):
                raise ValueError('Product quantity is written by the movement ledger only.')
        super().save(*args, **kwargs)


class InventoryMovement(models.Model):
    """
    One immutable ledger entry (insert only).

    ``quantity`` is positive for in/out and a signed non-zero delta for
    adjustments. ``sequence`` is the product's ledger_version after this
    entry was applied, so (product, sequence) is unique and gap-free.
    """

    class MovementType(models.TextChoices):
        IN = 'in', _('Stock in')
        OUT = 'out', _('Stock out')
        ADJUSTMENT = 'adjustment', _('Adjustment')

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name='movements',
        verbose_name=_('product'),
    )
    movement_type = models.CharField(
        _('movement type'), max_length=12,
        choices=MovementType.choices, db_index=True,
    )
    quantity = models.IntegerField(_('quantity'))
    previous_quantity = models.PositiveIntegerField(_('previous quantity'))
    new_quantity = models.PositiveIntegerField(_('new quantity'))
    sequence = models.PositiveIntegerField(_('sequence'))

    reason = models.CharField(_('reason'), max_length=255, blank=True)
    reference_number = models.CharField(_('reference number'), max_length=100, blank=True)

    # Counterparties live outside this ledger; stored as opaque references.
    vendor_id = models.CharField(_('vendor reference'), max_length=64, blank=True)
    customer_id = models.CharField(_('customer reference'), max_length=64, blank=True)

    sender_name = models.CharField(_('sender name'), max_length=200, blank=True)
    sender_phone = models.CharField(_('sender phone'), max_length=40, blank=True)
    sender_company = models.CharField(_('sender company'), max_length=200, blank=True)
    sender_address = models.CharField(_('sender address'), max_length=500, blank=True)
    receiver_name = models.CharField(_('receiver name'), max_length=200, blank=True)
    receiver_phone = models.CharField(_('receiver phone'), max_length=40, blank=True)
    receiver_company = models.CharField(_('receiver company'), max_length=200, blank=True)
    receiver_address = models.CharField(_('receiver address'), max_length=500, blank=True)
    delivery_person_name = models.CharField(_('delivery person name'), max_length=200, blank=True)
    delivery_person_phone = models.CharField(_('delivery person phone'), max_length=40, blank=True)

    images = models.JSONField(
        _('images'), default=list, blank=True,
        help_text=_('Storage references of evidence photos'),
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True,
        on_delete=models.SET_NULL,
        related_name='+',
        verbose_name=_('created by'),
    )
    created_at = models.DateTimeField(_('created at'), auto_now_add=True, db_index=True)
    # Immutable: no updated_at.

    class Meta:
        db_table = 'inventory_movements'
        verbose_name = _('inventory movement')
        verbose_name_plural = _('inventory movements')
        ordering = ['-created_at', '-sequence']
        indexes = [
            models.Index(fields=['product', 'created_at'], name='inv_movement_product_idx'),
            models.Index(fields=['movement_type', 'created_at'], name='inv_movement_type_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['product', 'sequence'],
                name='inventory_movement_unique_sequence',
            ),
            models.CheckConstraint(
                condition=~models.Q(quantity=0),
                name='inventory_movement_non_zero_quantity',
            ),
        ]

    def __str__(self):
        return f'{self.movement_type} {self.quantity} product={self.product_id} #{self.sequence}'

    @staticmethod
    def signed_delta(movement_type: str, quantity: int) -> int:
        if movement_type == InventoryMovement.MovementType.OUT:
            return -quantity
        return quantity

    @property
    def delta(self) -> int:
        return self.signed_delta(self.movement_type, self.quantity)

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise NotImplementedError('InventoryMovement is insert-only; updates are not allowed.')
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise NotImplementedError('InventoryMovement records cannot be deleted.')

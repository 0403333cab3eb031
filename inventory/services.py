"""
Inventory — Service Layer

Catalog management, the movement ledger, scan ingestion, the provenance-rich
movement recorder and read-side reporting. ``LedgerService.apply_movement``
is the only code path that changes ``Product.quantity``.

@file inventory/services.py
"""

import logging

from django.conf import settings
from django.core.files.base import ContentFile
from django.db import IntegrityError, transaction
from django.db.models import Max, Q
from django.utils import timezone

from core.constants import (
    AUDIT_ACTION_ARCHIVE,
    AUDIT_ACTION_DELETE,
    AUDIT_ACTION_RECONCILE,
)
from core.exceptions import (
    BusinessRuleViolation,
    DuplicateResourceError,
    InsufficientStockError,
    ResourceNotFoundError,
    TransientConflictError,
)
from core.services import AuditService, MediaStorageService

from .identity import build_symbol_payload, decode_symbol_payload, encode_symbol, generate_sku
from .models import LEDGER_FIELDS, InventoryMovement, Product, normalize_name

logger = logging.getLogger('opstrack')

MovementType = InventoryMovement.MovementType

OPENING_STOCK_REASON = 'Initial stock'
SCAN_IN_REASON = 'Barcode scan stock-in'
SCAN_OUT_REASON = 'Barcode scan stock-out'

PRODUCT_IMAGE_FOLDER = 'inventory/products'
MOVEMENT_IMAGE_FOLDER = 'inventory/movements'

DESCRIPTIVE_FIELDS = frozenset({
    'name', 'description', 'category', 'brand', 'unit', 'unit_price', 'barcode',
})
UPDATABLE_FIELDS = DESCRIPTIVE_FIELDS | {'is_active'}

COMMON_PROVENANCE = frozenset({'reason', 'reference_number'})
DELIVERY_PROVENANCE = frozenset({'delivery_person_name', 'delivery_person_phone'})
PROVENANCE_BY_TYPE = {
    MovementType.IN: COMMON_PROVENANCE | DELIVERY_PROVENANCE | {
        'vendor_id', 'sender_name', 'sender_phone', 'sender_company', 'sender_address',
    },
    MovementType.OUT: COMMON_PROVENANCE | DELIVERY_PROVENANCE | {
        'customer_id', 'receiver_name', 'receiver_phone', 'receiver_company', 'receiver_address',
    },
    MovementType.ADJUSTMENT: COMMON_PROVENANCE,
}
ALL_PROVENANCE = frozenset().union(*PROVENANCE_BY_TYPE.values())


def _check_image_count(count: int) -> None:
    if count > settings.INVENTORY_MAX_IMAGES:
        raise BusinessRuleViolation(
            detail=f'At most {settings.INVENTORY_MAX_IMAGES} images are allowed.',
        )


# ---------------------------------------------------------------------------
# Movement ledger
# ---------------------------------------------------------------------------

class LedgerService:
    """Atomic quantity changes and drift detection."""

    @staticmethod
    def signed_delta(movement_type: str, quantity) -> int:
        if movement_type not in MovementType.values:
            raise BusinessRuleViolation(detail=f'Invalid movement type: {movement_type}.')
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise BusinessRuleViolation(detail='Quantity must be an integer.')
        if movement_type == MovementType.ADJUSTMENT:
            if quantity == 0:
                raise BusinessRuleViolation(detail='Adjustment delta must be non-zero.')
        elif quantity <= 0:
            raise BusinessRuleViolation(detail='Quantity must be positive.')
        return InventoryMovement.signed_delta(movement_type, quantity)

    @staticmethod
    def _compare_and_swap(product: Product, new_quantity: int) -> bool:
        """Write the counter only if no other movement landed since ``product`` was read."""
        updated = Product.objects.filter(
            pk=product.pk, ledger_version=product.ledger_version,
        ).update(
            quantity=new_quantity,
            ledger_version=product.ledger_version + 1,
            updated_at=timezone.now(),
        )
        return updated == 1

    @classmethod
    def apply_movement(
        cls,
        *,
        product_id,
        movement_type: str,
        quantity: int,
        actor=None,
        images=None,
        **provenance,
    ) -> InventoryMovement:
        """
        Apply one movement: lock the product row, compute the new quantity,
        reject negatives, swap the counter and append the ledger row, all in
        one transaction. A lost compare-and-swap (possible only where row
        locks are unavailable) is retried up to INVENTORY_LEDGER_MAX_ATTEMPTS
        times before TransientConflictError.
        """
        delta = cls.signed_delta(movement_type, quantity)
        unknown = set(provenance) - ALL_PROVENANCE
        if unknown:
            raise BusinessRuleViolation(detail=f'Unknown provenance fields: {", ".join(sorted(unknown))}.')

        attempts = settings.INVENTORY_LEDGER_MAX_ATTEMPTS
        for attempt in range(1, attempts + 1):
            with transaction.atomic():
                try:
                    product = Product.objects.select_for_update().get(pk=product_id)
                except Product.DoesNotExist:
                    raise ResourceNotFoundError(detail='Product not found.')

                if not product.is_active:
                    raise BusinessRuleViolation(detail=f'Product {product.sku} is archived.')

                previous = product.quantity
                new = previous + delta
                if new < 0:
                    raise InsufficientStockError(
                        detail=f'Insufficient stock: available={previous}, requested={-delta}.',
                    )

                if cls._compare_and_swap(product, new):
                    movement = InventoryMovement(
                        product=product,
                        movement_type=movement_type,
                        quantity=quantity,
                        previous_quantity=previous,
                        new_quantity=new,
                        sequence=product.ledger_version + 1,
                        images=list(images or []),
                        created_by=actor,
                        **provenance,
                    )
                    movement.save()
                    logger.info(
                        'Ledger %s qty=%s product=%s %s->%s seq=%s',
                        movement_type, quantity, product.pk, previous, new, movement.sequence,
                    )
                    return movement

            logger.warning(
                'Ledger write conflict on product %s (attempt %d/%d)',
                product_id, attempt, attempts,
            )

        raise TransientConflictError()

    @staticmethod
    @transaction.atomic
    def reconcile(*, product_id, fix: bool = False, actor=None) -> dict:
        """
        Replay the ledger for one product and compare with the stored counter.
        With ``fix`` the counter is rewritten to the replayed total.
        """
        try:
            product = Product.objects.select_for_update().get(pk=product_id)
        except Product.DoesNotExist:
            raise ResourceNotFoundError(detail='Product not found.')

        rows = product.movements.order_by('sequence').values_list(
            'sequence', 'movement_type', 'quantity', 'previous_quantity', 'new_quantity',
        )

        running = 0
        last_sequence = 0
        broken_links = []
        for sequence, movement_type, qty, previous, new in rows:
            if previous != running:
                broken_links.append(sequence)
            running += InventoryMovement.signed_delta(movement_type, qty)
            if new != running and sequence not in broken_links:
                broken_links.append(sequence)
            last_sequence = sequence

        drift = product.quantity - running
        report = {
            'product_id': str(product.pk),
            'sku': product.sku,
            'recorded_quantity': product.quantity,
            'ledger_quantity': running,
            'drift': drift,
            'movement_count': len(rows),
            'ledger_version': product.ledger_version,
            'broken_links': broken_links,
            'consistent': drift == 0 and not broken_links and product.ledger_version == last_sequence,
            'repaired': False,
        }

        if not report['consistent']:
            logger.warning(
                'Ledger drift on product %s: recorded=%s ledger=%s broken=%s',
                product.pk, product.quantity, running, broken_links,
            )

        if fix and (drift or product.ledger_version != last_sequence):
            if running < 0:
                raise BusinessRuleViolation(
                    detail='Ledger replays to a negative quantity; manual review required.',
                )
            Product.objects.filter(pk=product.pk).update(
                quantity=running,
                ledger_version=last_sequence,
                updated_at=timezone.now(),
            )
            AuditService.log(
                actor=actor,
                action=AUDIT_ACTION_RECONCILE,
                model_name='Product',
                object_id=str(product.pk),
                old_values={'quantity': product.quantity, 'ledger_version': product.ledger_version},
                new_values={'quantity': running, 'ledger_version': last_sequence},
            )
            report['repaired'] = True
            logger.info('Ledger counter repaired for product %s: %s -> %s', product.pk, product.quantity, running)

        return report


# ---------------------------------------------------------------------------
# Product catalog
# ---------------------------------------------------------------------------

class ProductService:
    """Catalog rows: creation, descriptive edits, archiving, lookups."""

    @staticmethod
    def _unique_sku() -> str:
        sku = generate_sku()
        if Product.objects.filter(sku=sku).exists():
            sku = generate_sku()
            if Product.objects.filter(sku=sku).exists():
                raise DuplicateResourceError(detail='Could not allocate a unique SKU; retry.')
        return sku

    @staticmethod
    def _clean_fields(fields: dict) -> dict:
        cleaned = dict(fields)
        if 'name' in cleaned:
            cleaned['name'] = ' '.join((cleaned['name'] or '').split())
            if not cleaned['name']:
                raise BusinessRuleViolation(detail='Name is required.')
        if 'barcode' in cleaned:
            cleaned['barcode'] = (cleaned['barcode'] or '').strip() or None
        for key in ('description', 'category', 'brand'):
            if key in cleaned and cleaned[key] is None:
                cleaned[key] = ''
        if cleaned.get('unit_price') is not None and cleaned['unit_price'] < 0:
            raise BusinessRuleViolation(detail='Unit price cannot be negative.')
        if 'unit' in cleaned and not cleaned['unit']:
            cleaned['unit'] = 'pcs'
        return cleaned

    @staticmethod
    def _attach_symbol(product: Product) -> None:
        payload = build_symbol_payload(sku=product.sku, name=product.name, price=product.unit_price)
        product.symbol_image.save(f'{product.sku}.png', ContentFile(encode_symbol(payload)), save=False)

    @classmethod
    def _insert(
        cls,
        *,
        fields: dict,
        sku: str | None,
        is_manual_entry: bool,
        image_refs: list[str],
        opening_quantity: int,
        actor=None,
        opening_provenance: dict | None = None,
    ) -> Product:
        if sku:
            sku = sku.strip()
            if Product.objects.filter(sku=sku).exists():
                raise DuplicateResourceError(detail=f'SKU {sku} already exists.')
        else:
            sku = cls._unique_sku()

        barcode = fields.get('barcode')
        if barcode and Product.objects.filter(barcode=barcode).exists():
            raise DuplicateResourceError(detail=f'Barcode {barcode} already exists.')

        product = Product(
            sku=sku,
            is_manual_entry=is_manual_entry,
            images=image_refs,
            created_by=actor,
            updated_by=actor,
            **fields,
        )
        product._current_user = actor
        product.full_clean(exclude=['symbol_image'], validate_unique=False)
        if is_manual_entry:
            cls._attach_symbol(product)

        try:
            with transaction.atomic():
                product.save()
        except IntegrityError:
            raise DuplicateResourceError(detail='SKU or barcode already exists.')

        if opening_quantity:
            LedgerService.apply_movement(
                product_id=product.pk,
                movement_type=MovementType.IN,
                quantity=opening_quantity,
                actor=actor,
                reason=OPENING_STOCK_REASON,
                **(opening_provenance or {}),
            )
            product.refresh_from_db()
        return product

    @classmethod
    @transaction.atomic
    def create_product(
        cls,
        *,
        name: str = '',
        sku: str | None = None,
        quantity: int = 0,
        is_manual_entry: bool = False,
        images=None,
        actor=None,
        **fields,
    ) -> Product:
        """
        Insert a product with quantity 0, then post any requested opening
        stock as an ``in`` movement in the same transaction.
        """
        unknown = set(fields) - DESCRIPTIVE_FIELDS
        if unknown:
            raise BusinessRuleViolation(detail=f'Unknown product fields: {", ".join(sorted(unknown))}.')
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
            raise BusinessRuleViolation(detail='Initial quantity must be a non-negative integer.')
        images = list(images or [])
        _check_image_count(len(images))

        fields = cls._clean_fields({**fields, 'name': name})
        image_refs = MediaStorageService.store_many(images, folder=PRODUCT_IMAGE_FOLDER)
        product = cls._insert(
            fields=fields,
            sku=sku,
            is_manual_entry=is_manual_entry,
            image_refs=image_refs,
            opening_quantity=quantity,
            actor=actor,
        )
        logger.info(
            'Product created: %s %s (manual=%s, qty=%s)',
            product.pk, product.sku, is_manual_entry, product.quantity,
        )
        return product

    @classmethod
    @transaction.atomic
    def create_bulk_manual_products(
        cls,
        *,
        count,
        name: str,
        images=None,
        vendor_id: str = '',
        actor=None,
        **fields,
    ) -> list[Product]:
        """
        One catalog row per physical unit: ``count`` products sharing the
        descriptive attributes, each with its own SKU, symbol and a single
        unit of opening stock.
        """
        if isinstance(count, bool) or not isinstance(count, int) or not 1 <= count <= settings.INVENTORY_BULK_MAX:
            raise BusinessRuleViolation(
                detail=f'Count must be between 1 and {settings.INVENTORY_BULK_MAX}.',
            )
        if fields.get('barcode'):
            raise BusinessRuleViolation(detail='Bulk manual products cannot share a physical barcode.')
        fields.pop('barcode', None)
        unknown = set(fields) - DESCRIPTIVE_FIELDS
        if unknown:
            raise BusinessRuleViolation(detail=f'Unknown product fields: {", ".join(sorted(unknown))}.')
        images = list(images or [])
        _check_image_count(len(images))

        fields = cls._clean_fields({**fields, 'name': name})
        image_refs = MediaStorageService.store_many(images, folder=PRODUCT_IMAGE_FOLDER)
        opening_provenance = {'vendor_id': str(vendor_id)} if vendor_id else None

        products = [
            cls._insert(
                fields=fields,
                sku=None,
                is_manual_entry=True,
                image_refs=list(image_refs),
                opening_quantity=1,
                actor=actor,
                opening_provenance=opening_provenance,
            )
            for _ in range(count)
        ]
        logger.info('Bulk manual products created: %d x "%s"', count, fields['name'])
        return products

    @classmethod
    @transaction.atomic
    def update_product(
        cls,
        *,
        product_id,
        actor=None,
        images_to_add=None,
        images_to_remove=None,
        **fields,
    ) -> Product:
        """Descriptive edits only; stock goes through the ledger."""
        if LEDGER_FIELDS.intersection(fields):
            raise BusinessRuleViolation(
                detail='Quantity cannot be set directly; record a stock movement instead.',
            )

        try:
            product = Product.objects.select_for_update().get(pk=product_id)
        except Product.DoesNotExist:
            raise ResourceNotFoundError()

        if 'sku' in fields:
            if fields.pop('sku') != product.sku:
                raise BusinessRuleViolation(detail='SKU is immutable.')
        if 'is_manual_entry' in fields:
            if bool(fields.pop('is_manual_entry')) != product.is_manual_entry:
                raise BusinessRuleViolation(detail='Manual-entry flag is fixed at creation.')
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise BusinessRuleViolation(detail=f'Unknown product fields: {", ".join(sorted(unknown))}.')

        fields = cls._clean_fields(fields)
        barcode = fields.get('barcode')
        if barcode and Product.objects.filter(barcode=barcode).exclude(pk=product.pk).exists():
            raise DuplicateResourceError(detail=f'Barcode {barcode} already exists.')

        removed = set(images_to_remove or [])
        kept = [ref for ref in product.images if ref not in removed]
        additions = list(images_to_add or [])
        _check_image_count(len(kept) + len(additions))

        for field, value in fields.items():
            setattr(product, field, value)
        product.images = kept + MediaStorageService.store_many(additions, folder=PRODUCT_IMAGE_FOLDER)
        product.updated_by = actor
        product._current_user = actor
        product.full_clean(exclude=['symbol_image'], validate_unique=False)

        try:
            with transaction.atomic():
                product.save()
        except IntegrityError:
            raise DuplicateResourceError(detail='Barcode already exists.')

        logger.info('Product updated: %s', product.pk)
        return product

    @staticmethod
    @transaction.atomic
    def delete_product(*, product_id, actor=None) -> str:
        """
        Products with ledger history are archived so their movements stay
        resolvable; products that never moved are removed. Returns
        ``'archived'`` or ``'deleted'``.
        """
        try:
            product = Product.objects.select_for_update().get(pk=product_id)
        except Product.DoesNotExist:
            raise ResourceNotFoundError()

        if product.movements.exists():
            if not product.is_active:
                return 'archived'
            product._current_user = actor
            product.archive(user=actor)
            AuditService.log(
                actor=actor,
                action=AUDIT_ACTION_ARCHIVE,
                model_name='Product',
                object_id=str(product.pk),
                old_values={'is_active': True},
                new_values={'is_active': False},
            )
            logger.info('Product archived: %s', product.pk)
            return 'archived'

        snapshot = AuditService.snapshot(product)
        pk = product.pk
        product.delete()
        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_DELETE,
            model_name='Product',
            object_id=str(pk),
            old_values=snapshot,
        )
        logger.info('Product deleted: %s', pk)
        return 'deleted'

    # --- lookups ---

    @staticmethod
    def find_by_barcode(code: str, *, include_archived: bool = False) -> Product:
        qs = Product.objects.all() if include_archived else Product.objects.filter(is_active=True)
        try:
            return qs.get(barcode=code)
        except Product.DoesNotExist:
            raise ResourceNotFoundError(detail='Product not found.')

    @staticmethod
    def find_by_sku(sku: str, *, include_archived: bool = False) -> Product:
        qs = Product.objects.all() if include_archived else Product.objects.filter(is_active=True)
        try:
            return qs.get(sku=sku)
        except Product.DoesNotExist:
            raise ResourceNotFoundError(detail='Product not found.')

    @staticmethod
    def resolve_code(code: str) -> Product | None:
        """
        Map scanned text to a product: physical barcode first, then SKU,
        then a generated symbol payload. Archived products are returned;
        callers decide what to do with them.
        """
        code = (code or '').strip()
        if not code:
            return None
        product = Product.objects.filter(barcode=code).first()
        if product is None:
            product = Product.objects.filter(sku=code).first()
        if product is None:
            payload = decode_symbol_payload(code)
            if payload is not None:
                product = Product.objects.filter(sku=payload['sku']).first()
        return product

    @staticmethod
    def list_grouped_by_name(*, search: str = '', category: str = '', brand: str = '') -> list[dict]:
        """
        Aggregate active rows by normalised name; groups sorted by total
        quantity, largest first.
        """
        qs = Product.objects.filter(is_active=True).select_related('created_by')
        if search:
            qs = qs.filter(
                Q(name__icontains=search) | Q(sku__icontains=search) | Q(barcode__icontains=search),
            )
        if category:
            qs = qs.filter(category=category)
        if brand:
            qs = qs.filter(brand=brand)

        groups: dict[str, dict] = {}
        for product in qs.order_by('name', '-created_at'):
            group = groups.get(product.group_key)
            if group is None:
                group = groups[product.group_key] = {
                    'name': product.name,
                    'brand': product.brand,
                    'category': product.category,
                    'total_quantity': 0,
                    'items': [],
                }
            group['total_quantity'] += product.quantity
            group['items'].append(product)

        return sorted(groups.values(), key=lambda g: (-g['total_quantity'], normalize_name(g['name'])))


# ---------------------------------------------------------------------------
# Scan ingestion
# ---------------------------------------------------------------------------

class ScanService:
    """Single-unit adjustments driven by a scanned code."""

    @staticmethod
    def _require_code(code) -> str:
        code = (code or '').strip()
        if not code:
            raise BusinessRuleViolation(detail='Barcode is required.')
        return code

    @classmethod
    def scan_stock_in(cls, *, code: str, actor=None) -> dict:
        """
        +1 on a known product. Unknown codes create nothing: the caller
        collects metadata and follows up with ``create_product``.
        """
        code = cls._require_code(code)
        product = ProductService.resolve_code(code)
        if product is None:
            logger.info('Scan stock-in: unknown code %s', code)
            return {'is_new': True, 'barcode': code}

        movement = LedgerService.apply_movement(
            product_id=product.pk,
            movement_type=MovementType.IN,
            quantity=1,
            actor=actor,
            reason=SCAN_IN_REASON,
        )
        product.refresh_from_db()
        return {
            'is_new': False,
            'product': product,
            'previous_quantity': movement.previous_quantity,
            'new_quantity': movement.new_quantity,
        }

    @classmethod
    def scan_stock_out(cls, *, code: str, actor=None) -> dict:
        code = cls._require_code(code)
        product = ProductService.resolve_code(code)
        if product is None:
            raise ResourceNotFoundError(detail='Product not found in inventory.')

        movement = LedgerService.apply_movement(
            product_id=product.pk,
            movement_type=MovementType.OUT,
            quantity=1,
            actor=actor,
            reason=SCAN_OUT_REASON,
        )
        product.refresh_from_db()
        return {
            'is_new': False,
            'product': product,
            'previous_quantity': movement.previous_quantity,
            'new_quantity': movement.new_quantity,
        }

    @staticmethod
    def describe_code(code: str) -> dict:
        """
        Read-only resolution for the scan screen: the existing product, or a
        pre-filled template for creating one.
        """
        code = (code or '').strip()
        product = ProductService.resolve_code(code)
        if product is not None:
            return {'is_new': False, 'product': product}

        payload = decode_symbol_payload(code) or {}
        return {
            'is_new': True,
            'barcode': '' if payload else code,
            'sku': payload.get('sku') or generate_sku(),
            'name': payload.get('name') or '',
            'unit_price': payload.get('price'),
            'unit': 'pcs',
        }


# ---------------------------------------------------------------------------
# Movement recorder
# ---------------------------------------------------------------------------

class MovementService:
    """Arbitrary-quantity movements with provenance and evidence images."""

    DIRECTIONS = {'increase': 1, 'decrease': -1}

    @classmethod
    @transaction.atomic
    def record_movement(
        cls,
        *,
        product_id,
        movement_type: str,
        quantity,
        direction: str | None = None,
        images=None,
        actor=None,
        **provenance,
    ) -> InventoryMovement:
        """
        Validate the request, keep only the provenance that belongs to the
        movement type, store evidence images and post through the ledger.
        Quantities are always positive; adjustments carry a ``direction``.
        Signed deltas are accepted by ``LedgerService.apply_movement`` only.
        """
        if movement_type not in MovementType.values:
            raise BusinessRuleViolation(detail=f'Invalid movement type: {movement_type}.')
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise BusinessRuleViolation(detail='Quantity must be an integer.')

        if quantity <= 0:
            raise BusinessRuleViolation(detail='Quantity must be positive.')
        if movement_type == MovementType.ADJUSTMENT:
            if direction not in cls.DIRECTIONS:
                raise BusinessRuleViolation(detail='Adjustments need a direction: increase or decrease.')
            quantity *= cls.DIRECTIONS[direction]

        unknown = set(provenance) - ALL_PROVENANCE
        if unknown:
            raise BusinessRuleViolation(detail=f'Unknown provenance fields: {", ".join(sorted(unknown))}.')
        allowed = PROVENANCE_BY_TYPE[movement_type]
        kept = {
            key: ('' if value is None else str(value))
            for key, value in provenance.items()
            if key in allowed
        }

        images = list(images or [])
        _check_image_count(len(images))
        if not Product.objects.filter(pk=product_id).exists():
            raise ResourceNotFoundError(detail='Product not found.')
        image_refs = MediaStorageService.store_many(images, folder=MOVEMENT_IMAGE_FOLDER)

        return LedgerService.apply_movement(
            product_id=product_id,
            movement_type=movement_type,
            quantity=quantity,
            actor=actor,
            images=image_refs,
            **kept,
        )


# ---------------------------------------------------------------------------
# Catalog query / reporting
# ---------------------------------------------------------------------------

class CatalogQueryService:
    """Read-only views over the catalog and the ledger."""

    SUGGESTION_LIMIT = 10
    SUGGESTION_MIN_LENGTH = 2

    @staticmethod
    def movement_queryset():
        return InventoryMovement.objects.select_related('product', 'created_by')

    @classmethod
    def movement_history(cls, product_id):
        if not Product.objects.filter(pk=product_id).exists():
            raise ResourceNotFoundError(detail='Product not found.')
        return cls.movement_queryset().filter(product_id=product_id).order_by('sequence')

    @staticmethod
    def categories() -> list[str]:
        return list(
            Product.objects
            .filter(is_active=True)
            .exclude(category='')
            .order_by('category')
            .values_list('category', flat=True)
            .distinct()
        )

    @staticmethod
    def brands() -> list[str]:
        return list(
            Product.objects
            .filter(is_active=True)
            .exclude(brand='')
            .order_by('brand')
            .values_list('brand', flat=True)
            .distinct()
        )

    @classmethod
    def suggestions(cls, query: str) -> list[dict]:
        """
        Distinct descriptive attribute sets for names containing ``query``,
        most recently used first, to pre-fill repeat entries.
        """
        query = (query or '').strip()
        if len(query) < cls.SUGGESTION_MIN_LENGTH:
            return []
        rows = (
            Product.objects
            .filter(is_active=True, name__icontains=query)
            .values('name', 'brand', 'category', 'unit_price', 'unit')
            .annotate(last_used=Max('created_at'))
            .order_by('-last_used')[:cls.SUGGESTION_LIMIT]
        )
        return [
            {key: row[key] for key in ('name', 'brand', 'category', 'unit_price', 'unit')}
            for row in rows
        ]

"""
Inventory — Serializers

Read representations for products and ledger entries, and the request
shapes of the write endpoints. Validation of business rules stays in the
service layer; these only coerce types and check upload limits.

@file inventory/serializers.py
"""

from django.conf import settings
from rest_framework import serializers

from core.services import MediaStorageService

from .models import InventoryMovement, Product


def _validate_uploads(files):
    if len(files) > settings.INVENTORY_MAX_IMAGES:
        raise serializers.ValidationError(
            f'At most {settings.INVENTORY_MAX_IMAGES} images are allowed.',
        )
    for upload in files:
        if upload.size > settings.INVENTORY_MAX_IMAGE_BYTES:
            raise serializers.ValidationError(
                f'{upload.name} exceeds the {settings.INVENTORY_MAX_IMAGE_BYTES // (1024 * 1024)} MB limit.',
            )
    return files


# ---------------------------------------------------------------------------
# Product
# ---------------------------------------------------------------------------

class ProductReadSerializer(serializers.ModelSerializer):
    image_urls = serializers.SerializerMethodField()
    created_by_name = serializers.CharField(
        source='created_by.get_full_name', read_only=True, default=None,
    )

    class Meta:
        model = Product
        fields = [
            'id', 'sku', 'name', 'description', 'category', 'brand',
            'unit', 'unit_price', 'quantity', 'barcode',
            'is_manual_entry', 'symbol_image', 'images', 'image_urls',
            'is_active', 'ledger_version',
            'created_by', 'created_by_name', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_image_urls(self, obj):
        return [MediaStorageService.url(ref) for ref in obj.images or []]


class ProductCreateSerializer(serializers.ModelSerializer):
    """POST /products — JSON or multipart with optional ``images`` files."""

    quantity = serializers.IntegerField(min_value=0, required=False, default=0)
    images = serializers.ListField(
        child=serializers.ImageField(), required=False, default=list,
    )

    class Meta:
        model = Product
        fields = [
            'sku', 'name', 'description', 'category', 'brand',
            'unit', 'unit_price', 'barcode', 'is_manual_entry',
            'quantity', 'images',
        ]
        # Duplicates are reported by the service as conflicts, not field errors.
        extra_kwargs = {
            'sku': {'required': False, 'allow_blank': True, 'validators': []},
            'barcode': {'validators': [], 'allow_blank': True},
        }

    def validate_images(self, value):
        return _validate_uploads(value)


class ProductUpdateSerializer(serializers.Serializer):
    """
    PUT/PATCH /products/{id}. ``quantity`` and ``sku`` are accepted here only
    so the service can reject them explicitly.
    """

    name = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField(max_length=120, required=False, allow_blank=True)
    brand = serializers.CharField(max_length=120, required=False, allow_blank=True)
    unit = serializers.CharField(max_length=20, required=False, allow_blank=True)
    unit_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True,
    )
    barcode = serializers.CharField(max_length=128, required=False, allow_blank=True, allow_null=True)
    is_active = serializers.BooleanField(required=False)
    sku = serializers.CharField(max_length=64, required=False)
    quantity = serializers.IntegerField(required=False)
    images_to_add = serializers.ListField(child=serializers.ImageField(), required=False)
    images_to_remove = serializers.ListField(child=serializers.CharField(), required=False)

    def validate_images_to_add(self, value):
        return _validate_uploads(value)


class BulkManualProductSerializer(serializers.Serializer):
    """POST /products/bulk-manual — ``count`` single-unit rows."""

    name = serializers.CharField(max_length=255)
    count = serializers.IntegerField()
    description = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField(max_length=120, required=False, allow_blank=True)
    brand = serializers.CharField(max_length=120, required=False, allow_blank=True)
    unit = serializers.CharField(max_length=20, required=False, default='pcs')
    unit_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True,
    )
    vendor_id = serializers.CharField(max_length=64, required=False, allow_blank=True, default='')
    images = serializers.ListField(
        child=serializers.ImageField(), required=False, default=list,
    )

    def validate_images(self, value):
        return _validate_uploads(value)


class ProductGroupSerializer(serializers.Serializer):
    name = serializers.CharField()
    brand = serializers.CharField()
    category = serializers.CharField()
    total_quantity = serializers.IntegerField()
    items = ProductReadSerializer(many=True)


class ProductSuggestionSerializer(serializers.Serializer):
    name = serializers.CharField()
    brand = serializers.CharField()
    category = serializers.CharField()
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
    unit = serializers.CharField()


class ScanSerializer(serializers.Serializer):
    barcode = serializers.CharField(max_length=2048, trim_whitespace=True)


class ReconcileSerializer(serializers.Serializer):
    fix = serializers.BooleanField(required=False, default=False)


# ---------------------------------------------------------------------------
# Movement
# ---------------------------------------------------------------------------

class InventoryMovementReadSerializer(serializers.ModelSerializer):
    product_sku = serializers.CharField(source='product.sku', read_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True)
    delta = serializers.IntegerField(read_only=True)
    image_urls = serializers.SerializerMethodField()
    created_by_name = serializers.CharField(
        source='created_by.get_full_name', read_only=True, default=None,
    )

    class Meta:
        model = InventoryMovement
        fields = [
            'id', 'product', 'product_sku', 'product_name',
            'movement_type', 'quantity', 'delta',
            'previous_quantity', 'new_quantity', 'sequence',
            'reason', 'reference_number', 'vendor_id', 'customer_id',
            'sender_name', 'sender_phone', 'sender_company', 'sender_address',
            'receiver_name', 'receiver_phone', 'receiver_company', 'receiver_address',
            'delivery_person_name', 'delivery_person_phone',
            'images', 'image_urls',
            'created_by', 'created_by_name', 'created_at',
        ]
        read_only_fields = fields

    def get_image_urls(self, obj):
        return [MediaStorageService.url(ref) for ref in obj.images or []]


class InventoryMovementWriteSerializer(serializers.Serializer):
    """POST /movements — multipart provenance fields plus evidence images."""

    product = serializers.UUIDField()
    movement_type = serializers.ChoiceField(choices=InventoryMovement.MovementType.choices)
    quantity = serializers.IntegerField(min_value=1)
    direction = serializers.ChoiceField(choices=['increase', 'decrease'], required=False)
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True)
    reference_number = serializers.CharField(max_length=100, required=False, allow_blank=True)
    vendor_id = serializers.CharField(max_length=64, required=False, allow_blank=True)
    customer_id = serializers.CharField(max_length=64, required=False, allow_blank=True)
    sender_name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    sender_phone = serializers.CharField(max_length=40, required=False, allow_blank=True)
    sender_company = serializers.CharField(max_length=200, required=False, allow_blank=True)
    sender_address = serializers.CharField(max_length=500, required=False, allow_blank=True)
    receiver_name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    receiver_phone = serializers.CharField(max_length=40, required=False, allow_blank=True)
    receiver_company = serializers.CharField(max_length=200, required=False, allow_blank=True)
    receiver_address = serializers.CharField(max_length=500, required=False, allow_blank=True)
    delivery_person_name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    delivery_person_phone = serializers.CharField(max_length=40, required=False, allow_blank=True)
    images = serializers.ListField(
        child=serializers.ImageField(), required=False, default=list,
    )

    def validate_images(self, value):
        return _validate_uploads(value)

    def validate(self, attrs):
        if attrs['movement_type'] != InventoryMovement.MovementType.ADJUSTMENT:
            attrs.pop('direction', None)
        elif not attrs.get('direction'):
            raise serializers.ValidationError({'direction': 'Required for adjustments.'})
        return attrs

"""
Inventory — Views

DRF endpoints for the product catalog, scan ingestion, the movement
ledger and catalog facets.

@file inventory/views.py
"""

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import Product
from .permissions import CanManageInventory, CanReconcileLedger
from .serializers import (
    BulkManualProductSerializer,
    InventoryMovementReadSerializer,
    InventoryMovementWriteSerializer,
    ProductCreateSerializer,
    ProductGroupSerializer,
    ProductReadSerializer,
    ProductSuggestionSerializer,
    ProductUpdateSerializer,
    ReconcileSerializer,
    ScanSerializer,
)
from .services import (
    CatalogQueryService,
    LedgerService,
    MovementService,
    ProductService,
    ScanService,
)

UPLOAD_PARSERS = [JSONParser, MultiPartParser, FormParser]


def _scan_payload(result: dict) -> dict:
    if result['is_new']:
        return result
    data = dict(result)
    data['product'] = ProductReadSerializer(result['product']).data
    return data


class ProductViewSet(viewsets.ModelViewSet):
    """
    Catalog CRUD plus lookups, grouped view, suggestions, per-product
    ledger history and reconciliation.

    Listing shows active products unless ``is_active`` is given explicitly.
    """

    permission_classes = [IsAuthenticated, CanManageInventory]
    parser_classes = UPLOAD_PARSERS
    lookup_value_regex = '[0-9a-fA-F-]{36}'
    filterset_fields = ['category', 'brand', 'is_manual_entry', 'is_active', 'unit']
    search_fields = ['name', 'sku', 'description', 'barcode']
    ordering_fields = ['created_at', 'name', 'quantity', 'unit_price', 'sku']
    ordering = ['-created_at']

    def get_queryset(self):
        qs = Product.objects.select_related('created_by')
        if self.action == 'list' and 'is_active' not in self.request.query_params:
            qs = qs.filter(is_active=True)
        return qs

    def get_serializer_class(self):
        if self.action == 'create':
            return ProductCreateSerializer
        if self.action in ('update', 'partial_update'):
            return ProductUpdateSerializer
        return ProductReadSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = ProductService.create_product(actor=request.user, **serializer.validated_data)
        return Response(
            {'success': True, 'data': ProductReadSerializer(product).data},
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        product = ProductService.update_product(
            product_id=instance.pk, actor=request.user, **serializer.validated_data,
        )
        return Response({'success': True, 'data': ProductReadSerializer(product).data})

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        outcome = ProductService.delete_product(product_id=instance.pk, actor=request.user)
        return Response({'success': True, 'data': {'id': str(instance.pk), 'result': outcome}})

    # --- Catalog reads ---

    @action(detail=False, methods=['get'], url_path='grouped')
    def grouped(self, request):
        groups = ProductService.list_grouped_by_name(
            search=request.query_params.get('search', ''),
            category=request.query_params.get('category', ''),
            brand=request.query_params.get('brand', ''),
        )
        return Response({'success': True, 'data': ProductGroupSerializer(groups, many=True).data})

    @action(detail=False, methods=['get'], url_path=r'by-barcode/(?P<code>[^/]+)')
    def by_barcode(self, request, code=None):
        product = ProductService.find_by_barcode(code)
        return Response({'success': True, 'data': ProductReadSerializer(product).data})

    @action(detail=False, methods=['get'], url_path=r'resolve/(?P<code>.+)')
    def resolve(self, request, code=None):
        result = ScanService.describe_code(code)
        return Response({'success': True, 'data': _scan_payload(result)})

    @action(detail=False, methods=['get'], url_path='suggestions')
    def suggestions(self, request):
        rows = CatalogQueryService.suggestions(request.query_params.get('query', ''))
        return Response({'success': True, 'data': ProductSuggestionSerializer(rows, many=True).data})

    # --- Ledger ---

    @action(detail=True, methods=['get'], url_path='movements')
    def movements(self, request, pk=None):
        history = CatalogQueryService.movement_history(self.get_object().pk)
        page = self.paginate_queryset(history)
        if page is not None:
            ser = InventoryMovementReadSerializer(page, many=True)
            return self.get_paginated_response(ser.data)
        ser = InventoryMovementReadSerializer(history, many=True)
        return Response({'success': True, 'data': ser.data})

    @action(
        detail=True, methods=['post'], url_path='reconcile',
        permission_classes=[IsAuthenticated, CanReconcileLedger],
    )
    def reconcile(self, request, pk=None):
        ser = ReconcileSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        report = LedgerService.reconcile(
            product_id=self.get_object().pk,
            fix=ser.validated_data['fix'],
            actor=request.user,
        )
        return Response({'success': True, 'data': report})

    @action(detail=False, methods=['post'], url_path='bulk-manual')
    def bulk_manual(self, request):
        ser = BulkManualProductSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        products = ProductService.create_bulk_manual_products(
            actor=request.user, **ser.validated_data,
        )
        return Response(
            {'success': True, 'data': ProductReadSerializer(products, many=True).data},
            status=status.HTTP_201_CREATED,
        )


class InventoryMovementViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Ledger entries: list/retrieve and the provenance-rich recorder."""

    permission_classes = [IsAuthenticated, CanManageInventory]
    parser_classes = UPLOAD_PARSERS
    filterset_fields = {
        'product': ['exact'],
        'movement_type': ['exact'],
        'created_at': ['gte', 'lte'],
    }
    search_fields = ['reason', 'reference_number', 'product__name', 'product__sku']
    ordering_fields = ['created_at', 'sequence', 'quantity']
    ordering = ['-created_at']

    def get_queryset(self):
        return CatalogQueryService.movement_queryset()

    def get_serializer_class(self):
        if self.action == 'create':
            return InventoryMovementWriteSerializer
        return InventoryMovementReadSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        movement = MovementService.record_movement(
            product_id=data.pop('product'),
            movement_type=data.pop('movement_type'),
            quantity=data.pop('quantity'),
            actor=request.user,
            **data,
        )
        movement.product.refresh_from_db()
        return Response(
            {
                'success': True,
                'data': {
                    'movement': InventoryMovementReadSerializer(movement).data,
                    'product': ProductReadSerializer(movement.product).data,
                },
            },
            status=status.HTTP_201_CREATED,
        )


class ScanStockInView(APIView):
    """POST /inventory/scan-stock-in — +1 on a known code, or report it as new."""
    permission_classes = [IsAuthenticated, CanManageInventory]

    def post(self, request):
        ser = ScanSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        result = ScanService.scan_stock_in(code=ser.validated_data['barcode'], actor=request.user)
        return Response({'success': True, 'data': _scan_payload(result)})


class ScanStockOutView(APIView):
    """POST /inventory/scan-stock-out — −1 on a known code."""
    permission_classes = [IsAuthenticated, CanManageInventory]

    def post(self, request):
        ser = ScanSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        result = ScanService.scan_stock_out(code=ser.validated_data['barcode'], actor=request.user)
        return Response({'success': True, 'data': _scan_payload(result)})


class CategoryListView(APIView):
    """GET /inventory/categories — distinct categories of active products."""
    permission_classes = [IsAuthenticated, CanManageInventory]

    def get(self, request):
        return Response({'success': True, 'data': CatalogQueryService.categories()})


class BrandListView(APIView):
    """GET /inventory/brands — distinct brands of active products."""
    permission_classes = [IsAuthenticated, CanManageInventory]

    def get(self, request):
        return Response({'success': True, 'data': CatalogQueryService.brands()})

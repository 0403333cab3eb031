"""
Inventory — URL Configuration

@file inventory/urls.py
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import (
    BrandListView,
    CategoryListView,
    InventoryMovementViewSet,
    ProductViewSet,
    ScanStockInView,
    ScanStockOutView,
)

app_name = 'inventory'

router = DefaultRouter()
router.register('products', ProductViewSet, basename='product')
router.register('movements', InventoryMovementViewSet, basename='movement')

urlpatterns = [
    path('scan-stock-in/', ScanStockInView.as_view(), name='scan-stock-in'),
    path('scan-stock-out/', ScanStockOutView.as_view(), name='scan-stock-out'),
    path('categories/', CategoryListView.as_view(), name='categories'),
    path('brands/', BrandListView.as_view(), name='brands'),
    path('', include(router.urls)),
]

"""
OpsTrack — Root URL Configuration

All API endpoints are namespaced under /api/v1/.
The DRF browsable API is available for route inspection in development.

@file config/urls.py
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.reverse import reverse

admin.site.site_header = 'OpsTrack Administration'
admin.site.site_title = 'OpsTrack'
admin.site.index_title = 'Inventory Stock Ledger'


@api_view(['GET'])
@permission_classes([AllowAny])
def api_root(request, format=None):
    """OpsTrack API v1 — endpoint directory."""
    return Response({
        'auth': {
            'login': reverse('api-v1:auth:login', request=request, format=format),
            'refresh': reverse('api-v1:auth:token-refresh', request=request, format=format),
            'logout': reverse('api-v1:auth:logout', request=request, format=format),
            'me': reverse('api-v1:auth:me', request=request, format=format),
        },
        'inventory': {
            'products': reverse('api-v1:inventory:product-list', request=request, format=format),
            'grouped': reverse('api-v1:inventory:product-grouped', request=request, format=format),
            'movements': reverse('api-v1:inventory:movement-list', request=request, format=format),
            'scan_stock_in': reverse('api-v1:inventory:scan-stock-in', request=request, format=format),
            'scan_stock_out': reverse('api-v1:inventory:scan-stock-out', request=request, format=format),
            'categories': reverse('api-v1:inventory:categories', request=request, format=format),
            'brands': reverse('api-v1:inventory:brands', request=request, format=format),
        },
    })


api_v1_patterns = [
    path('', api_root, name='api-root'),
    path('auth/', include('users.urls', namespace='auth')),
    path('inventory/', include('inventory.urls', namespace='inventory')),
]

urlpatterns = [
    path('admin/', admin.site.urls),

    # DRF session auth (powers the "Log in" button on the browsable API)
    path('api/auth/', include('rest_framework.urls', namespace='rest_framework')),

    # Versioned API
    path('api/v1/', include((api_v1_patterns, 'api-v1'))),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

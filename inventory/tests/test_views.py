"""
Tests — inventory API: permissions, product CRUD with ledger-backed
opening stock, lookups, scans, movements, bulk manual entry, reconcile
and the response envelope.

@file inventory/tests/test_views.py
"""

import pytest
from django.urls import reverse
from rest_framework import status

from inventory.models import Product
from tests.factories import ProductFactory, RoleFactory, UserRoleFactory


pytestmark = pytest.mark.django_db

PRODUCTS_URL = 'api-v1:inventory:product-list'


def _detail(product):
    return reverse('api-v1:inventory:product-detail', args=[product.pk])


class TestPermissions:

    def test_unauthenticated(self, api_client):
        resp = api_client.get(reverse(PRODUCTS_URL))
        assert resp.status_code == status.HTTP_401_UNAUTHORIZED
        assert resp.json()['success'] is False

    def test_user_without_role_forbidden(self, authenticated_client):
        for name in (PRODUCTS_URL, 'api-v1:inventory:movement-list', 'api-v1:inventory:categories'):
            assert authenticated_client.get(reverse(name)).status_code == status.HTTP_403_FORBIDDEN

    def test_employee_role_forbidden(self, api_client, user):
        UserRoleFactory(user=user, role=RoleFactory(name='EMPLOYEE'))
        api_client.force_authenticate(user=user)
        resp = api_client.post(reverse('api-v1:inventory:scan-stock-in'), {'barcode': '1'}, format='json')
        assert resp.status_code == status.HTTP_403_FORBIDDEN

    def test_manager_allowed(self, manager_client):
        assert manager_client.get(reverse(PRODUCTS_URL)).status_code == status.HTTP_200_OK

    def test_reconcile_requires_admin(self, manager_client):
        product = ProductFactory(stock=1)
        url = reverse('api-v1:inventory:product-reconcile', args=[product.pk])
        assert manager_client.post(url, {}, format='json').status_code == status.HTTP_403_FORBIDDEN


class TestProductEndpoints:

    def test_create_with_opening_stock(self, manager_client, manager_user):
        resp = manager_client.post(reverse(PRODUCTS_URL), {
            'name': 'Widget', 'barcode': '4006381333931', 'quantity': 10, 'unit_price': '2.50',
        }, format='json')
        assert resp.status_code == status.HTTP_201_CREATED
        body = resp.json()
        assert body['success'] is True
        assert body['data']['quantity'] == 10
        assert body['data']['sku'].startswith('SKU-')
        product = Product.objects.get(pk=body['data']['id'])
        assert product.movements.get().created_by == manager_user

    def test_create_duplicate_barcode_conflict(self, manager_client):
        ProductFactory(barcode='4006381333931')
        resp = manager_client.post(reverse(PRODUCTS_URL), {
            'name': 'Widget', 'barcode': '4006381333931',
        }, format='json')
        assert resp.status_code == status.HTTP_409_CONFLICT
        assert resp.json()['code'] == 'DUPLICATE_RESOURCE'

    def test_create_negative_quantity(self, manager_client):
        resp = manager_client.post(reverse(PRODUCTS_URL), {'name': 'Widget', 'quantity': -1}, format='json')
        assert resp.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_hides_archived(self, manager_client):
        ProductFactory(name='Live')
        archived = ProductFactory(name='Gone', stock=1)
        archived.archive()
        resp = manager_client.get(reverse(PRODUCTS_URL))
        body = resp.json()
        assert [p['name'] for p in body['data']] == ['Live']
        assert body['meta']['count'] == 1

    def test_list_archived_on_request(self, manager_client):
        archived = ProductFactory(name='Gone', stock=1)
        archived.archive()
        resp = manager_client.get(reverse(PRODUCTS_URL), {'is_active': 'false'})
        assert [p['name'] for p in resp.json()['data']] == ['Gone']

    def test_update_rejects_quantity(self, manager_client):
        product = ProductFactory(stock=3)
        resp = manager_client.patch(_detail(product), {'quantity': 99}, format='json')
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        product.refresh_from_db()
        assert product.quantity == 3

    def test_update_descriptive(self, manager_client):
        product = ProductFactory(stock=3)
        resp = manager_client.patch(_detail(product), {'brand': 'Acme'}, format='json')
        assert resp.status_code == status.HTTP_200_OK
        assert resp.json()['data']['brand'] == 'Acme'
        assert resp.json()['data']['quantity'] == 3

    def test_delete_archives_when_moved(self, manager_client):
        product = ProductFactory(stock=3)
        resp = manager_client.delete(_detail(product))
        assert resp.status_code == status.HTTP_200_OK
        assert resp.json()['data']['result'] == 'archived'
        product.refresh_from_db()
        assert product.is_active is False

    def test_delete_removes_when_never_moved(self, manager_client):
        product = ProductFactory()
        resp = manager_client.delete(_detail(product))
        assert resp.json()['data']['result'] == 'deleted'
        assert not Product.objects.filter(pk=product.pk).exists()

    def test_by_barcode(self, manager_client):
        product = ProductFactory(barcode='123456')
        resp = manager_client.get(reverse('api-v1:inventory:product-by-barcode', args=['123456']))
        assert resp.status_code == status.HTTP_200_OK
        assert resp.json()['data']['id'] == str(product.pk)

    def test_by_barcode_missing(self, manager_client):
        resp = manager_client.get(reverse('api-v1:inventory:product-by-barcode', args=['000']))
        assert resp.status_code == status.HTTP_404_NOT_FOUND
        assert resp.json()['code'] == 'RESOURCE_NOT_FOUND'

    def test_resolve_unknown_returns_template(self, manager_client):
        resp = manager_client.get(reverse('api-v1:inventory:product-resolve', args=['999']))
        data = resp.json()['data']
        assert data['is_new'] is True
        assert data['barcode'] == '999'

    def test_grouped(self, manager_client):
        ProductFactory(name='Widget', stock=2)
        ProductFactory(name='widget', stock=1)
        resp = manager_client.get(reverse('api-v1:inventory:product-grouped'))
        groups = resp.json()['data']
        assert len(groups) == 1
        assert groups[0]['total_quantity'] == 3
        assert len(groups[0]['items']) == 2

    def test_suggestions(self, manager_client):
        ProductFactory(name='Widget', brand='Acme')
        resp = manager_client.get(reverse('api-v1:inventory:product-suggestions'), {'query': 'wid'})
        assert resp.json()['data'][0]['brand'] == 'Acme'

    def test_movements_history(self, manager_client):
        product = ProductFactory(stock=3)
        resp = manager_client.get(reverse('api-v1:inventory:product-movements', args=[product.pk]))
        body = resp.json()
        assert body['meta']['count'] == 1
        assert body['data'][0]['new_quantity'] == 3
        assert body['data'][0]['delta'] == 3

    def test_bulk_manual(self, manager_client):
        resp = manager_client.post(reverse('api-v1:inventory:product-bulk-manual'), {
            'name': 'Widget', 'count': 3, 'brand': 'Acme',
        }, format='json')
        assert resp.status_code == status.HTTP_201_CREATED
        data = resp.json()['data']
        assert len(data) == 3
        assert all(p['is_manual_entry'] and p['quantity'] == 1 for p in data)
        assert len({p['sku'] for p in data}) == 3

    def test_bulk_manual_count_out_of_range(self, manager_client):
        resp = manager_client.post(reverse('api-v1:inventory:product-bulk-manual'), {
            'name': 'Widget', 'count': 0,
        }, format='json')
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert not Product.objects.exists()


class TestScanEndpoints:

    def test_scan_in_known(self, manager_client):
        ProductFactory(barcode='123', stock=1)
        resp = manager_client.post(reverse('api-v1:inventory:scan-stock-in'), {'barcode': '123'}, format='json')
        assert resp.status_code == status.HTTP_200_OK
        data = resp.json()['data']
        assert data['is_new'] is False
        assert (data['previous_quantity'], data['new_quantity']) == (1, 2)
        assert data['product']['quantity'] == 2

    def test_scan_in_unknown(self, manager_client):
        resp = manager_client.post(reverse('api-v1:inventory:scan-stock-in'), {'barcode': '999'}, format='json')
        assert resp.json()['data'] == {'is_new': True, 'barcode': '999'}
        assert not Product.objects.exists()

    def test_scan_out_insufficient(self, manager_client):
        ProductFactory(barcode='123')
        resp = manager_client.post(reverse('api-v1:inventory:scan-stock-out'), {'barcode': '123'}, format='json')
        assert resp.status_code == status.HTTP_409_CONFLICT
        assert resp.json()['code'] == 'INSUFFICIENT_STOCK'

    def test_scan_out_unknown(self, manager_client):
        resp = manager_client.post(reverse('api-v1:inventory:scan-stock-out'), {'barcode': '999'}, format='json')
        assert resp.status_code == status.HTTP_404_NOT_FOUND

    def test_scan_requires_barcode(self, manager_client):
        resp = manager_client.post(reverse('api-v1:inventory:scan-stock-in'), {}, format='json')
        assert resp.status_code == status.HTTP_400_BAD_REQUEST


class TestMovementEndpoints:

    def test_record_outbound(self, manager_client):
        product = ProductFactory(stock=5)
        resp = manager_client.post(reverse('api-v1:inventory:movement-list'), {
            'product': str(product.pk), 'movement_type': 'out', 'quantity': 2,
            'customer_id': 'C-1', 'vendor_id': 'V-1',
        }, format='json')
        assert resp.status_code == status.HTTP_201_CREATED
        data = resp.json()['data']
        assert data['product']['quantity'] == 3
        assert data['movement']['customer_id'] == 'C-1'
        assert data['movement']['vendor_id'] == ''

    def test_record_adjustment_direction(self, manager_client):
        product = ProductFactory(stock=5)
        resp = manager_client.post(reverse('api-v1:inventory:movement-list'), {
            'product': str(product.pk), 'movement_type': 'adjustment', 'quantity': 2, 'direction': 'decrease',
        }, format='json')
        assert resp.json()['data']['product']['quantity'] == 3

    def test_record_adjustment_without_direction_rejected(self, manager_client):
        product = ProductFactory(stock=5)
        resp = manager_client.post(reverse('api-v1:inventory:movement-list'), {
            'product': str(product.pk), 'movement_type': 'adjustment', 'quantity': -3,
        }, format='json')
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        product.refresh_from_db()
        assert product.quantity == 5
        assert product.movements.count() == 1

    @pytest.mark.parametrize('movement_type', ['in', 'out', 'adjustment'])
    def test_record_non_positive_quantity_rejected(self, manager_client, movement_type):
        product = ProductFactory(stock=5)
        resp = manager_client.post(reverse('api-v1:inventory:movement-list'), {
            'product': str(product.pk), 'movement_type': movement_type, 'quantity': 0, 'direction': 'increase',
        }, format='json')
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert resp.json()['code'] == 'VALIDATION_ERROR'
        assert product.movements.count() == 1

    def test_record_insufficient(self, manager_client):
        product = ProductFactory(stock=1)
        resp = manager_client.post(reverse('api-v1:inventory:movement-list'), {
            'product': str(product.pk), 'movement_type': 'out', 'quantity': 2,
        }, format='json')
        assert resp.status_code == status.HTTP_409_CONFLICT

    def test_list_filter_by_product_and_type(self, manager_client):
        product = ProductFactory(stock=5)
        ProductFactory(stock=2)
        manager_client.post(reverse('api-v1:inventory:scan-stock-out'), {'barcode': product.sku}, format='json')
        resp = manager_client.get(reverse('api-v1:inventory:movement-list'), {
            'product': str(product.pk), 'movement_type': 'out',
        })
        body = resp.json()
        assert body['meta']['count'] == 1
        assert body['data'][0]['product_sku'] == product.sku

    def test_movements_are_read_only(self, manager_client):
        product = ProductFactory(stock=1)
        url = reverse('api-v1:inventory:movement-detail', args=[product.movements.get().pk])
        assert manager_client.get(url).status_code == status.HTTP_200_OK
        assert manager_client.delete(url).status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert manager_client.patch(url, {'quantity': 9}, format='json').status_code == status.HTTP_405_METHOD_NOT_ALLOWED


class TestReconcileEndpoint:

    def test_admin_repairs_drift(self, inventory_admin_client):
        product = ProductFactory(stock=4)
        Product.objects.filter(pk=product.pk).update(quantity=7)
        url = reverse('api-v1:inventory:product-reconcile', args=[product.pk])
        report = inventory_admin_client.post(url, {'fix': True}, format='json').json()['data']
        assert report['drift'] == 3
        assert report['repaired'] is True
        product.refresh_from_db()
        assert product.quantity == 4


class TestFacets:

    def test_categories_and_brands(self, admin_client):
        ProductFactory(category='Tools', brand='Acme')
        ProductFactory(category='Paint', brand='Acme')
        assert admin_client.get(reverse('api-v1:inventory:categories')).json()['data'] == ['Paint', 'Tools']
        assert admin_client.get(reverse('api-v1:inventory:brands')).json()['data'] == ['Acme']

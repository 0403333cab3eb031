"""
Core — Service Tests

AuditService snapshots and log entries, MediaStorageService references,
and the standard error envelope produced by the exception handler.

@file core/tests/test_services.py
"""

from decimal import Decimal

import pytest
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import InterfaceError, OperationalError
from django.http import Http404

from core.exceptions import (
    InsufficientStockError,
    TransientConflictError,
    standard_exception_handler,
)
from core.models import AuditLog
from core.services import AuditService, MediaStorageService
from tests.factories import ProductFactory, UserFactory


@pytest.mark.django_db
class TestAuditService:

    def test_log(self):
        user = UserFactory()
        log = AuditService.log(
            actor=user,
            action=AuditLog.ActionChoices.ARCHIVE,
            model_name='Product',
            object_id='abc-123',
            old_values={'is_active': True},
            new_values={'is_active': False},
        )
        assert log.actor == user
        assert log.action == 'ARCHIVE'
        assert log.new_values == {'is_active': False}

    def test_snapshot_is_json_safe(self):
        product = ProductFactory(unit_price=Decimal('3.50'))
        snapshot = AuditService.snapshot(product)
        assert snapshot['unit_price'] == '3.50'
        assert snapshot['name'] == product.name
        assert 'quantity' not in snapshot

    def test_snapshot_exclude(self):
        snapshot = AuditService.snapshot(UserFactory(), exclude=['password'])
        assert 'password' not in snapshot
        assert 'phone' in snapshot

    def test_user_create_audited_without_password(self):
        user = UserFactory()
        log = AuditLog.objects.get(model_name='User', object_id=str(user.pk), action='CREATE')
        assert 'password' not in log.new_values

    def test_client_ip_prefers_forwarded_for(self, rf):
        request = rf.get('/', HTTP_X_FORWARDED_FOR='10.0.0.9, 10.0.0.1', REMOTE_ADDR='127.0.0.1')
        assert AuditService.get_client_ip(request) == '10.0.0.9'
        assert AuditService.get_client_ip(rf.get('/', REMOTE_ADDR='127.0.0.1')) == '127.0.0.1'


class TestMediaStorageService:

    def test_store_returns_reference_in_folder(self):
        upload = SimpleUploadedFile('Photo.PNG', b'data', content_type='image/png')
        ref = MediaStorageService.store(upload, folder='inventory/test')
        assert ref.startswith('inventory/test/')
        assert ref.endswith('.png')
        assert default_storage.exists(ref)
        assert MediaStorageService.url(ref).endswith(ref)

    def test_store_many(self):
        uploads = [SimpleUploadedFile(f'{i}.jpg', b'x') for i in range(3)]
        refs = MediaStorageService.store_many(uploads, folder='inventory/test')
        assert len(set(refs)) == 3

    def test_store_many_empty(self):
        assert MediaStorageService.store_many(None, folder='inventory/test') == []


class TestStandardExceptionHandler:

    def test_conflict_envelope(self):
        response = standard_exception_handler(InsufficientStockError(), {})
        assert response.status_code == 409
        assert response.data['success'] is False
        assert response.data['code'] == 'INSUFFICIENT_STOCK'

    def test_transient_conflict(self):
        response = standard_exception_handler(TransientConflictError(), {})
        assert response.status_code == 409
        assert response.data['code'] == 'TRANSIENT_CONFLICT'

    def test_http404(self):
        response = standard_exception_handler(Http404(), {})
        assert response.status_code == 404
        assert response.data['code'] == 'RESOURCE_NOT_FOUND'

    def test_storage_failure_is_503(self):
        response = standard_exception_handler(OperationalError('db gone'), {})
        assert response.status_code == 503
        assert response.data['code'] == 'STORAGE_UNAVAILABLE'

    def test_lost_connection_is_503(self):
        response = standard_exception_handler(InterfaceError('connection already closed'), {})
        assert response.status_code == 503
        assert response.data['code'] == 'STORAGE_UNAVAILABLE'

    def test_unhandled_is_500(self):
        response = standard_exception_handler(RuntimeError('boom'), {})
        assert response.status_code == 500
        assert response.data['code'] == 'INTERNAL_ERROR'

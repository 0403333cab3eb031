"""
Core — Audit & Media Services

AuditService writes audit log entries from any app. MediaStorageService
is the thin boundary to the blob store (Django default storage, S3 in
production): it accepts uploads and hands back opaque references.

@file core/services.py
"""

import logging
import os
import uuid
from decimal import Decimal
from typing import Any

from django.core.files.storage import default_storage
from django.db.models.fields.files import FieldFile
from django.forms.models import model_to_dict
from django.utils import timezone

from core.models import AuditLog

logger = logging.getLogger('opstrack')


class AuditService:
    """Centralised audit logging for write operations."""

    @staticmethod
    def log(
        *,
        actor,
        action: str,
        model_name: str,
        object_id: str,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
        ip_address: str | None = None,
        user_agent: str = '',
    ) -> AuditLog:
        return AuditLog.objects.create(
            actor=actor,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            old_values=old_values,
            new_values=new_values,
            ip_address=ip_address,
            user_agent=user_agent,
        )

    @staticmethod
    def snapshot(instance, fields=None, exclude=None) -> dict[str, Any]:
        """
        Serialise a model instance to a plain dict suitable for JSON
        storage. DateTimes are ISO-formatted; UUIDs stringified; files
        reduced to their storage name; M2M / querysets reduced to lists
        of PKs.
        """
        data = model_to_dict(instance, fields=fields, exclude=exclude)
        cleaned: dict[str, Any] = {}
        for key, value in data.items():
            if value is None:
                cleaned[key] = None
            elif isinstance(value, FieldFile):
                cleaned[key] = value.name or None
            elif isinstance(value, Decimal):
                cleaned[key] = str(value)
            elif hasattr(value, 'isoformat'):
                cleaned[key] = value.isoformat()
            elif hasattr(value, 'hex'):
                cleaned[key] = str(value)
            elif hasattr(value, 'all'):
                cleaned[key] = [str(obj.pk) for obj in value.all()]
            elif isinstance(value, (list, tuple)):
                cleaned[key] = [str(v.pk) if hasattr(v, 'pk') else v for v in value]
            else:
                cleaned[key] = value
        return cleaned

    @staticmethod
    def get_client_ip(request) -> str | None:
        x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
        if x_forwarded_for:
            return x_forwarded_for.split(',')[0].strip()
        return request.META.get('REMOTE_ADDR')


class MediaStorageService:
    """Store uploaded files in default storage; callers keep only the returned reference."""

    @staticmethod
    def store(upload, *, folder: str) -> str:
        _, ext = os.path.splitext(getattr(upload, 'name', '') or '')
        name = f'{folder}/{timezone.now():%Y/%m}/{uuid.uuid4().hex}{ext.lower()}'
        stored = default_storage.save(name, upload)
        logger.debug('Stored upload %s as %s', getattr(upload, 'name', ''), stored)
        return stored

    @classmethod
    def store_many(cls, uploads, *, folder: str) -> list[str]:
        return [cls.store(upload, folder=folder) for upload in uploads or []]

    @staticmethod
    def url(reference: str) -> str:
        return default_storage.url(reference)

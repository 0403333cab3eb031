"""
Inventory — Identity Generator

SKU generation and the scannable symbol printed on manually entered units.
Pure helpers: no database access.

@file inventory/identity.py
"""

import io
import json
import secrets
import string
import time

import qrcode
from django.conf import settings
from django.utils import timezone

SKU_PREFIX = 'SKU'
SYMBOL_KEYS = frozenset({'sku', 'name', 'price', 'issuer', 'ts'})

_BASE36 = string.digits + string.ascii_uppercase


def _to_base36(value: int) -> str:
    if value == 0:
        return '0'
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return ''.join(reversed(digits))


def generate_sku() -> str:
    """
    ``SKU-<base36 millisecond clock>-<4 random base36 chars>``.

    Unique with overwhelming probability; the catalog still verifies
    uniqueness at insertion time.
    """
    millis = time.time_ns() // 1_000_000
    suffix = ''.join(secrets.choice(_BASE36) for _ in range(4))
    return f'{SKU_PREFIX}-{_to_base36(millis)}-{suffix}'


def build_symbol_payload(*, sku: str, name: str, price=None) -> dict:
    return {
        'sku': sku,
        'name': name,
        'price': None if price is None else str(price),
        'issuer': settings.INVENTORY_SYMBOL_ISSUER,
        'ts': timezone.now().isoformat(),
    }


def encode_symbol(payload: dict) -> bytes:
    """Render ``payload`` as JSON inside a QR symbol; return PNG bytes."""
    img = qrcode.make(json.dumps(payload, sort_keys=True))
    buf = io.BytesIO()
    img.save(buf, format='PNG')
    return buf.getvalue()


def decode_symbol_payload(text: str) -> dict | None:
    """
    Parse the text read from a generated symbol. Anything that is not a
    symbol payload (a plain barcode, a SKU, foreign JSON) yields None.
    """
    if not text or not text.lstrip().startswith('{'):
        return None
    try:
        data = json.loads(text)
    except ValueError:
        return None
    if not isinstance(data, dict) or not SYMBOL_KEYS.issubset(data):
        return None
    if not isinstance(data['sku'], str) or not data['sku']:
        return None
    return data

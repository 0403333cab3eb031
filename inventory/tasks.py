"""
Inventory — Celery Tasks

Periodic ledger health check.

@file inventory/tasks.py
"""

import logging

from celery import shared_task

logger = logging.getLogger('opstrack')


@shared_task(name='inventory.detect_ledger_drift')
def detect_ledger_drift_task():
    """
    Nightly task: replay the ledger of every active product in report-only
    mode and log the ones whose counter disagrees with their movements.
    Repairs are left to an administrator (POST products/{id}/reconcile).
    """
    from .models import Product
    from .services import LedgerService

    checked = 0
    drifted = []
    for product_id in Product.objects.filter(is_active=True).values_list('pk', flat=True).iterator():
        report = LedgerService.reconcile(product_id=product_id, fix=False)
        checked += 1
        if not report['consistent']:
            drifted.append(report['product_id'])

    if drifted:
        logger.warning('detect_ledger_drift: %d of %d products inconsistent: %s', len(drifted), checked, drifted)
    else:
        logger.info('detect_ledger_drift completed: %d products consistent.', checked)
    return {'checked': checked, 'drifted': drifted}

"""
Inventory — Signals

Audit logging for Product create/update. Quantity changes bypass these
hooks (queryset update) because the movement rows are their audit trail.

@file inventory/signals.py
"""

from django.db.models.signals import post_save, pre_save
from django.dispatch import receiver

from core.constants import AUDIT_ACTION_CREATE, AUDIT_ACTION_UPDATE
from core.services import AuditService

from .models import Product

SNAPSHOT_EXCLUDE = ['quantity', 'ledger_version']

_product_pre: dict = {}


@receiver(pre_save, sender=Product)
def product_pre_save(sender, instance, **kwargs):
    if not instance._state.adding:
        try:
            old = Product.objects.get(pk=instance.pk)
            _product_pre[str(instance.pk)] = AuditService.snapshot(old, exclude=SNAPSHOT_EXCLUDE)
        except Product.DoesNotExist:
            pass


@receiver(post_save, sender=Product)
def product_post_save(sender, instance, created, **kwargs):
    action = AUDIT_ACTION_CREATE if created else AUDIT_ACTION_UPDATE
    old = _product_pre.pop(str(instance.pk), None)
    new = AuditService.snapshot(instance, exclude=SNAPSHOT_EXCLUDE)
    if not created and old == new:
        return
    AuditService.log(
        actor=getattr(instance, '_current_user', None),
        action=action,
        model_name='Product',
        object_id=str(instance.pk),
        old_values=old,
        new_values=new,
    )

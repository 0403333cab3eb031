"""
Users — Signals

Audit logging for User model lifecycle events.

@file users/signals.py
"""

from django.db.models.signals import post_save, pre_save
from django.dispatch import receiver

from core.constants import AUDIT_ACTION_CREATE, AUDIT_ACTION_UPDATE
from core.services import AuditService
from users.models import User

# Never copy credentials or login bookkeeping into the audit trail.
SNAPSHOT_EXCLUDE = ['password', 'last_login', 'groups', 'user_permissions']

_pre_save_state: dict = {}


@receiver(pre_save, sender=User)
def user_pre_save(sender, instance, **kwargs):
    if instance.pk:
        try:
            old = User.objects.get(pk=instance.pk)
            _pre_save_state[str(instance.pk)] = AuditService.snapshot(old, exclude=SNAPSHOT_EXCLUDE)
        except User.DoesNotExist:
            pass


@receiver(post_save, sender=User)
def user_post_save(sender, instance, created, update_fields=None, **kwargs):
    old_values = _pre_save_state.pop(str(instance.pk), None)
    if update_fields and set(update_fields) <= {'last_login', 'password'}:
        return

    new_values = AuditService.snapshot(instance, exclude=SNAPSHOT_EXCLUDE)
    if not created and old_values == new_values:
        return

    AuditService.log(
        actor=getattr(instance, '_current_user', None),
        action=AUDIT_ACTION_CREATE if created else AUDIT_ACTION_UPDATE,
        model_name='User',
        object_id=str(instance.pk),
        old_values=old_values,
        new_values=new_values,
    )

"""
Inventory — Permissions

The whole inventory surface is reserved to managers and administrators;
ledger repair is reserved to administrators.

@file inventory/permissions.py
"""

from users.permissions import HasRole


class CanManageInventory(HasRole):
    """Superuser, ADMIN or MANAGER."""

    roles = ('ADMIN', 'MANAGER')


class CanReconcileLedger(HasRole):
    """Only ADMIN (or superuser) may replay and repair the ledger."""

    roles = ('ADMIN',)

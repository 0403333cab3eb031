"""
OpsTrack — Root conftest for pytest

Shared fixtures available to all test modules.

@file conftest.py
"""

import pytest
from rest_framework.test import APIClient

from tests.factories import RoleFactory, SuperuserFactory, UserFactory, UserRoleFactory


@pytest.fixture
def api_client():
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Active user with default password TestPass2026! and no role."""
    return UserFactory()


@pytest.fixture
def admin_user(db):
    """Superuser with default password TestPass2026!"""
    return SuperuserFactory()


@pytest.fixture
def manager_user(db):
    """Active user holding the MANAGER role."""
    manager = UserFactory()
    UserRoleFactory(user=manager, role=RoleFactory(name='MANAGER'))
    return manager


@pytest.fixture
def inventory_admin(db):
    """Non-superuser holding the ADMIN role."""
    account = UserFactory()
    UserRoleFactory(user=account, role=RoleFactory(name='ADMIN'))
    return account


@pytest.fixture
def authenticated_client(api_client, user):
    """API client authenticated as a regular user."""
    api_client.force_authenticate(user=user)
    return api_client


@pytest.fixture
def admin_client(api_client, admin_user):
    """API client authenticated as a superuser."""
    api_client.force_authenticate(user=admin_user)
    return api_client


@pytest.fixture
def manager_client(api_client, manager_user):
    """API client authenticated as an inventory manager."""
    api_client.force_authenticate(user=manager_user)
    return api_client


@pytest.fixture
def inventory_admin_client(api_client, inventory_admin):
    """API client authenticated as an ADMIN-role user."""
    api_client.force_authenticate(user=inventory_admin)
    return api_client

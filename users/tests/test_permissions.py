"""
Tests — HasRole permission.

@file users/tests/test_permissions.py
"""

from types import SimpleNamespace

import pytest
from django.contrib.auth.models import AnonymousUser

from tests.factories import RoleFactory, SuperuserFactory, UserFactory, UserRoleFactory
from users.permissions import HasRole


pytestmark = pytest.mark.django_db


def _allowed(user, required_roles=()):
    request = SimpleNamespace(user=user)
    view = SimpleNamespace(required_roles=required_roles)
    return HasRole().has_permission(request, view)


class TestHasRole:

    def test_anonymous_denied(self):
        assert _allowed(AnonymousUser(), ['ADMIN']) is False

    def test_superuser_allowed(self):
        assert _allowed(SuperuserFactory(), ['ADMIN']) is True

    def test_matching_role(self):
        user = UserFactory()
        UserRoleFactory(user=user, role=RoleFactory(name='MANAGER'))
        assert _allowed(user, ['ADMIN', 'MANAGER']) is True

    def test_inactive_assignment_denied(self):
        user = UserFactory()
        UserRoleFactory(user=user, role=RoleFactory(name='MANAGER'), is_active=False)
        assert _allowed(user, ['MANAGER']) is False

    def test_no_required_roles_denies_regular_user(self):
        assert _allowed(UserFactory()) is False

    def test_subclass_roles(self):
        class ManagersOnly(HasRole):
            roles = ('MANAGER',)

        user = UserFactory()
        UserRoleFactory(user=user, role=RoleFactory(name='MANAGER'))
        assert ManagersOnly().has_permission(SimpleNamespace(user=user), SimpleNamespace()) is True

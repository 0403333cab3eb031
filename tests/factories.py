"""
OpsTrack — Test Factories

Factory Boy factories for generating test data. Used across all test
modules.

@file tests/factories.py
"""

import uuid
from decimal import Decimal

import factory

from core.models import AuditLog
from inventory.models import InventoryMovement, Product
from inventory.services import LedgerService
from users.models import Role, User, UserRole


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class UserFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = User
        skip_postgeneration_save = True

    phone = factory.Sequence(lambda n: f'+2576{n:07d}')
    email = factory.LazyAttribute(lambda o: f'user-{o.phone[-7:]}@test.local')
    first_name = factory.Faker('first_name')
    last_name = factory.Faker('last_name')
    is_active = True

    @factory.post_generation
    def password(self, create, extracted, **kwargs):
        password = extracted or 'TestPass2026!'
        self.set_password(password)
        if create:
            self.save(update_fields=['password'])


class SuperuserFactory(UserFactory):
    is_staff = True
    is_superuser = True


class RoleFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Role
        django_get_or_create = ('name',)

    name = factory.Sequence(lambda n: f'ROLE_{n}')
    description = factory.Faker('sentence')
    is_system = False


class UserRoleFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = UserRole

    user = factory.SubFactory(UserFactory)
    role = factory.SubFactory(RoleFactory)
    is_active = True


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------

class ProductFactory(factory.django.DjangoModelFactory):
    """
    Products are inserted empty; pass ``stock=N`` to post an opening
    ``in`` movement through the ledger.
    """

    class Meta:
        model = Product
        skip_postgeneration_save = True

    sku = factory.Sequence(lambda n: f'SKU-TEST-{n:05d}')
    name = factory.Sequence(lambda n: f'Product {n}')
    category = 'General'
    brand = factory.Faker('company')
    unit = 'pcs'
    unit_price = factory.LazyFunction(lambda: Decimal('9.99'))
    barcode = None
    is_manual_entry = False

    @factory.post_generation
    def stock(self, create, extracted, **kwargs):
        if create and extracted:
            LedgerService.apply_movement(
                product_id=self.pk,
                movement_type=InventoryMovement.MovementType.IN,
                quantity=extracted,
                reason='Initial stock',
            )
            self.refresh_from_db()


# ---------------------------------------------------------------------------
# Audit
# ---------------------------------------------------------------------------

class AuditLogFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = AuditLog

    actor = factory.SubFactory(UserFactory)
    action = AuditLog.ActionChoices.CREATE
    model_name = 'User'
    object_id = factory.LazyFunction(lambda: str(uuid.uuid4()))

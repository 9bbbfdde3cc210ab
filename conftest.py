import pytest
from catalog.tests.factories import ProductFactory
from common.choices import MovementType, Role
from inventory.commands import MovementCommand
from inventory.services import create_movement
from rest_framework.test import APIClient
from users.tests.factories import OwnerFactory, UserFactory


@pytest.fixture
def owner(db):
    return OwnerFactory()


@pytest.fixture
def staff(db):
    return UserFactory()


@pytest.fixture
def stocked_product(owner):
    """Build a product whose cached stock is backed by an opening ADJUSTMENT entry."""

    def make(stock: int = 10, **kwargs):
        product = ProductFactory(**kwargs)
        if stock:
            create_movement(
                command=MovementCommand(
                    product_id=product.id,
                    movement_type=MovementType.ADJUSTMENT,
                    qty=stock,
                    note="Opening stock",
                ),
                actor_id=owner.id,
                actor_role=Role.OWNER,
            )
            product.refresh_from_db()
        return product

    return make


@pytest.fixture
def owner_client(owner):
    client = APIClient()
    client.force_authenticate(user=owner)
    return client


@pytest.fixture
def staff_client(staff):
    client = APIClient()
    client.force_authenticate(user=staff)
    return client

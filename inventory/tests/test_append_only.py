import pytest
from catalog.models import Product
from catalog.tests.factories import ProductFactory
from common.choices import MovementType
from django.db import IntegrityError, transaction
from inventory.models import AppendOnlyError, InventoryMovement


@pytest.fixture
def movement(owner):
    return InventoryMovement.objects.create(
        product=ProductFactory(), movement_type=MovementType.RETURN, qty=1, actor=owner
    )


@pytest.mark.django_db
def test_saving_existing_entry_is_refused(movement):
    movement.qty = 99
    with pytest.raises(AppendOnlyError):
        movement.save()
    assert InventoryMovement.objects.get(id=movement.id).qty == 1


@pytest.mark.django_db
def test_deleting_entry_is_refused(movement):
    with pytest.raises(AppendOnlyError):
        movement.delete()
    assert InventoryMovement.objects.filter(id=movement.id).exists()


@pytest.mark.django_db
def test_bulk_update_and_delete_are_refused(movement):
    with pytest.raises(AppendOnlyError):
        InventoryMovement.objects.filter(id=movement.id).update(qty=5)
    with pytest.raises(AppendOnlyError):
        InventoryMovement.objects.all().delete()


@pytest.mark.django_db
def test_a_movement_is_reversed_at_most_once(movement, owner):
    InventoryMovement.objects.create(
        product=movement.product, movement_type=MovementType.CANCEL_SALE, qty=1, actor=owner, reverses=movement
    )
    with pytest.raises(IntegrityError), transaction.atomic():
        InventoryMovement.objects.create(
            product=movement.product, movement_type=MovementType.CANCEL_SALE, qty=1, actor=owner, reverses=movement
        )


@pytest.mark.django_db
def test_cached_stock_cannot_go_negative_in_the_database():
    product = ProductFactory()
    with pytest.raises(IntegrityError), transaction.atomic():
        Product.objects.filter(id=product.id).update(stock_cached=-1)


# EOF

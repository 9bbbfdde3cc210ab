import pytest
from audit.models import AuditLog
from common.choices import AuditAction, MovementType, Role
from inventory.commands import MovementCommand
from inventory.exceptions import InvalidInput, MovementForbidden, MovementNotFound, SaleAlreadyCancelled
from inventory.models import InventoryMovement
from inventory.selectors import ledger_stock_for_product
from inventory.services import cancel_sale_movement, create_movement


@pytest.fixture
def sold(stocked_product, staff):
    product = stocked_product(10)
    movement = create_movement(
        command=MovementCommand(
            product_id=product.id, movement_type=MovementType.SALE_OFFLINE, qty=4, unit_price_cents=500
        ),
        actor_id=staff.id,
        actor_role=Role.STAFF,
    )
    return product, movement


@pytest.mark.django_db
def test_cancel_restores_stock_and_links_original(sold, owner):
    product, sale = sold

    cancellation = cancel_sale_movement(movement_id=sale.id, actor_id=owner.id, actor_role=Role.OWNER)

    product.refresh_from_db()
    assert product.stock_cached == 10
    assert ledger_stock_for_product(product.id) == 10
    assert cancellation.movement_type == MovementType.CANCEL_SALE
    assert cancellation.qty == 4
    assert cancellation.unit_price_cents == 500
    assert cancellation.reverses_id == sale.id
    assert cancellation.note == f"Cancellation of sale movement {sale.id}"

    original = InventoryMovement.objects.get(id=sale.id)
    assert (original.movement_type, original.qty) == (MovementType.SALE_OFFLINE, 4)

    audit = AuditLog.objects.get(action=AuditAction.MOVEMENT_CANCEL)
    assert audit.entity_id == str(cancellation.id)
    assert audit.meta["original_movement_id"] == sale.id


@pytest.mark.django_db
def test_sale_can_only_be_cancelled_once(sold, owner):
    product, sale = sold
    cancel_sale_movement(movement_id=sale.id, actor_id=owner.id, actor_role=Role.OWNER)

    with pytest.raises(SaleAlreadyCancelled):
        cancel_sale_movement(movement_id=sale.id, actor_id=owner.id, actor_role=Role.OWNER)

    product.refresh_from_db()
    assert product.stock_cached == 10


@pytest.mark.django_db
def test_staff_cannot_cancel(sold, staff):
    _, sale = sold
    with pytest.raises(MovementForbidden):
        cancel_sale_movement(movement_id=sale.id, actor_id=staff.id, actor_role=Role.STAFF)


@pytest.mark.django_db
@pytest.mark.parametrize("movement_id", [987654, "not-an-id"])
def test_unknown_movement_is_not_found(owner, movement_id):
    with pytest.raises(MovementNotFound):
        cancel_sale_movement(movement_id=movement_id, actor_id=owner.id, actor_role=Role.OWNER)


@pytest.mark.django_db
def test_only_offline_sales_can_be_cancelled(stocked_product, owner):
    product = stocked_product(3)
    opening = InventoryMovement.objects.get(product=product)

    with pytest.raises(InvalidInput):
        cancel_sale_movement(movement_id=opening.id, actor_id=owner.id, actor_role=Role.OWNER)


# EOF

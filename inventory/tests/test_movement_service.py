import pytest
from audit.models import AuditLog
from catalog.tests.factories import ProductFactory
from common.choices import AuditAction, MovementType, Role
from inventory.commands import MovementCommand
from inventory.exceptions import InsufficientStock, InvalidInput, MovementForbidden, ProductNotFound
from inventory.models import InventoryMovement
from inventory.selectors import ledger_stock_for_product
from inventory.services import create_movement


def sale(product, qty, **kwargs):
    return MovementCommand(product_id=product.id, movement_type=MovementType.SALE_OFFLINE, qty=qty, **kwargs)


@pytest.mark.django_db
def test_sale_decrements_cached_stock(stocked_product, staff):
    product = stocked_product(10)

    movement = create_movement(command=sale(product, 3, unit_price_cents=1299), actor_id=staff.id, actor_role=Role.STAFF)

    product.refresh_from_db()
    assert product.stock_cached == 7
    assert movement.qty == 3
    assert movement.signed_qty == -3
    assert movement.unit_price_cents == 1299
    assert movement.actor_id == staff.id
    assert ledger_stock_for_product(product.id) == product.stock_cached


@pytest.mark.django_db
def test_oversell_leaves_ledger_and_stock_untouched(stocked_product, staff):
    product = stocked_product(2)
    entries_before = InventoryMovement.objects.count()

    with pytest.raises(InsufficientStock) as exc:
        create_movement(command=sale(product, 5), actor_id=staff.id, actor_role=Role.STAFF)

    assert (exc.value.available, exc.value.requested) == (2, 5)
    product.refresh_from_db()
    assert product.stock_cached == 2
    assert InventoryMovement.objects.count() == entries_before


@pytest.mark.django_db
def test_every_movement_type_keeps_cache_equal_to_ledger(stocked_product, owner):
    product = stocked_product(20)
    steps = [
        (MovementType.SALE_OFFLINE, 4, ""),
        (MovementType.RETURN, 1, ""),
        (MovementType.LOSS, 2, "broken"),
        (MovementType.CANCEL_SALE, 4, ""),
        (MovementType.ADJUSTMENT, -5, "recount"),
    ]
    for movement_type, qty, note in steps:
        create_movement(
            command=MovementCommand(product_id=product.id, movement_type=movement_type, qty=qty, note=note),
            actor_id=owner.id,
            actor_role=Role.OWNER,
        )
        product.refresh_from_db()
        assert product.stock_cached == ledger_stock_for_product(product.id)

    assert product.stock_cached == 14


@pytest.mark.django_db
def test_staff_cannot_create_adjustments(stocked_product, staff):
    product = stocked_product(5)

    with pytest.raises(MovementForbidden):
        create_movement(
            command=MovementCommand(
                product_id=product.id, movement_type=MovementType.ADJUSTMENT, qty=1, note="found one"
            ),
            actor_id=staff.id,
            actor_role=Role.STAFF,
        )

    product.refresh_from_db()
    assert product.stock_cached == 5


@pytest.mark.django_db
def test_unknown_role_is_forbidden(stocked_product, staff):
    product = stocked_product(5)
    with pytest.raises(MovementForbidden):
        create_movement(command=sale(product, 1), actor_id=staff.id, actor_role="GUEST")


@pytest.mark.django_db
def test_missing_product_is_not_found(staff):
    with pytest.raises(ProductNotFound):
        create_movement(
            command=MovementCommand(product_id=999_999, movement_type=MovementType.RETURN, qty=1),
            actor_id=staff.id,
            actor_role=Role.STAFF,
        )


@pytest.mark.django_db
def test_archived_product_is_not_found(staff):
    product = ProductFactory(is_archived=True)
    with pytest.raises(ProductNotFound):
        create_movement(
            command=MovementCommand(product_id=product.id, movement_type=MovementType.RETURN, qty=1),
            actor_id=staff.id,
            actor_role=Role.STAFF,
        )
    assert not InventoryMovement.objects.filter(product=product).exists()


@pytest.mark.django_db
def test_inactive_product_rejects_sales(stocked_product, staff):
    product = stocked_product(5, is_active=False)
    entries_before = InventoryMovement.objects.filter(product=product).count()

    with pytest.raises(InvalidInput) as exc:
        create_movement(command=sale(product, 1), actor_id=staff.id, actor_role=Role.STAFF)

    assert "product_id" in exc.value.errors
    product.refresh_from_db()
    assert product.stock_cached == 5
    assert InventoryMovement.objects.filter(product=product).count() == entries_before


@pytest.mark.django_db
def test_inactive_product_still_accepts_adjustments(owner):
    product = ProductFactory(is_active=False)
    create_movement(
        command=MovementCommand(product_id=product.id, movement_type=MovementType.ADJUSTMENT, qty=2, note="recount"),
        actor_id=owner.id,
        actor_role=Role.OWNER,
    )
    product.refresh_from_db()
    assert product.stock_cached == 2


@pytest.mark.django_db
def test_invalid_input_is_rejected_before_lookup(staff):
    with pytest.raises(InvalidInput):
        create_movement(
            command=MovementCommand(product_id=999_999, movement_type=MovementType.SALE_OFFLINE, qty=0),
            actor_id=staff.id,
            actor_role=Role.STAFF,
        )


@pytest.mark.django_db
def test_movement_is_audited_and_logged(stocked_product, staff, caplog):
    product = stocked_product(4)

    with caplog.at_level("INFO", logger="stockledger.inventory"):
        movement = create_movement(command=sale(product, 1), actor_id=staff.id, actor_role=Role.STAFF)

    log = AuditLog.objects.filter(action=AuditAction.MOVEMENT_CREATE, entity_id=str(movement.id)).get()
    assert log.actor_id == staff.id
    assert log.meta["signed_qty"] == -1
    record = next(r for r in caplog.records if r.getMessage() == "inventory.movement_created" and r.movement_id == movement.id)
    assert record.product_id == product.id
    assert record.actor_id == staff.id


# EOF

from unittest import mock

import pytest
from audit.models import AuditLog
from audit.services import record_audit_event
from common.choices import AuditAction, AuditEntity, MovementType, Role
from django.db import DatabaseError
from inventory.commands import MovementCommand
from inventory.models import InventoryMovement
from inventory.services import create_movement


@pytest.mark.django_db
def test_record_audit_event_persists(owner):
    entry = record_audit_event(
        action=AuditAction.MOVEMENT_CREATE,
        entity=AuditEntity.INVENTORY_MOVEMENT,
        entity_id=12,
        actor_id=owner.id,
        meta={"qty": 1},
    )
    assert entry is not None
    stored = AuditLog.objects.get(id=entry.id)
    assert stored.entity_id == "12"
    assert stored.actor_id == owner.id
    assert stored.meta == {"qty": 1}


@pytest.mark.django_db
def test_audit_failure_is_logged_not_raised(owner, caplog):
    with mock.patch.object(AuditLog.objects, "create", side_effect=DatabaseError("disk full")):
        result = record_audit_event(
            action=AuditAction.MOVEMENT_CREATE, entity=AuditEntity.INVENTORY_MOVEMENT, entity_id=1, actor_id=owner.id
        )
    assert result is None
    assert any(r.getMessage() == "audit.write_failed" for r in caplog.records)


@pytest.mark.django_db
def test_audit_failure_keeps_the_movement(stocked_product, staff):
    product = stocked_product(3)
    with mock.patch.object(AuditLog.objects, "create", side_effect=DatabaseError("disk full")):
        movement = create_movement(
            command=MovementCommand(product_id=product.id, movement_type=MovementType.SALE_OFFLINE, qty=1),
            actor_id=staff.id,
            actor_role=Role.STAFF,
        )
    assert InventoryMovement.objects.filter(id=movement.id).exists()
    product.refresh_from_db()
    assert product.stock_cached == 2


# EOF

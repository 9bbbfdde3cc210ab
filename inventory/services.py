"""Inventory services: transactional stock movements over the append-only ledger.

Every write follows the same path: validate the command, lock the product
row, project the new stock, then insert the ledger entry and swap the cached
stock in one transaction. The swap only succeeds if the stock read under the
lock is still current, so a lost update surfaces as ``StockConflict`` and the
whole attempt is retried.
"""

import logging
from dataclasses import dataclass, field

from audit.services import record_audit_event
from catalog.models import Product
from common.choices import AuditAction, AuditEntity, MovementType, Role
from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from .commands import MovementCommand, validate_command
from .exceptions import (
    BulkMovementFailed,
    InvalidInput,
    MovementError,
    MovementForbidden,
    MovementNotFound,
    ProductNotFound,
    SaleAlreadyCancelled,
    StockConflict,
)
from .models import InventoryMovement
from .projector import project

logger = logging.getLogger("stockledger.inventory")

ALLOWED_TYPES_BY_ROLE = {
    Role.OWNER: frozenset(MovementType),
    Role.STAFF: frozenset(
        {MovementType.SALE_OFFLINE, MovementType.CANCEL_SALE, MovementType.RETURN, MovementType.LOSS}
    ),
}


@dataclass(frozen=True)
class BulkMovementResult:
    movements: list = field(default_factory=list)
    count: int = 0


def _role(actor_role) -> Role:
    try:
        return Role(actor_role)
    except ValueError:
        raise MovementForbidden(f"Unknown role: {actor_role}", role=str(actor_role)) from None


def authorize_movement(movement_type, actor_role) -> None:
    """Raise ``MovementForbidden`` unless ``actor_role`` may record ``movement_type``."""
    role = _role(actor_role)
    if movement_type not in ALLOWED_TYPES_BY_ROLE[role]:
        raise MovementForbidden(
            f"{role.label} users cannot create {movement_type} movements",
            role=str(role),
            movement_type=str(movement_type),
        )


def _max_attempts() -> int:
    return max(1, int(getattr(settings, "INVENTORY_MAX_WRITE_ATTEMPTS", 3)))


def _retry_on_conflict(operation, **log_context):
    """Run ``operation`` until it stops raising ``StockConflict`` or attempts run out."""
    attempts = _max_attempts()
    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except StockConflict:
            logger.warning(
                "inventory.write_conflict",
                extra={"event": "inventory.write_conflict", "attempt": attempt, "max_attempts": attempts, **log_context},
            )
            if attempt >= attempts:
                raise


@transaction.atomic
def _apply_movement(command: MovementCommand, *, actor_id, actor_role, reverses_id=None) -> InventoryMovement:
    """Lookup, authorize, project and persist one validated command."""
    try:
        product = Product.objects.select_for_update().only("id", "stock_cached", "is_active", "is_archived").get(
            id=command.product_id
        )
    except Product.DoesNotExist:
        raise ProductNotFound("Product not found", product_id=str(command.product_id)) from None
    if product.is_archived:
        raise ProductNotFound("Product not found", product_id=str(command.product_id))
    if not product.is_active and command.movement_type != MovementType.ADJUSTMENT:
        raise InvalidInput(
            "Cannot create movements for inactive products",
            errors={"product_id": ["Product is inactive."]},
        )

    authorize_movement(command.movement_type, actor_role)

    current_stock = int(product.stock_cached)
    new_stock = project(current_stock, command, product_id=product.id)

    movement = InventoryMovement.objects.create(
        product_id=product.id,
        movement_type=command.movement_type,
        qty=command.qty,
        unit_price_cents=command.unit_price_cents,
        note=command.note,
        actor_id=actor_id,
        reverses_id=reverses_id,
    )
    # Compare-and-swap: only write if nobody moved the stock since we read it
    updated = Product.objects.filter(id=product.id, stock_cached=current_stock).update(
        stock_cached=new_stock, updated_at=timezone.now()
    )
    if updated != 1:
        raise StockConflict(
            "Stock changed concurrently; please retry",
            product_id=str(product.id),
        )
    return movement


def _movement_log_extra(movement: InventoryMovement, event: str) -> dict:
    return {
        "event": event,
        "movement_id": movement.id,
        "product_id": movement.product_id,
        "movement_type": str(movement.movement_type),
        "qty": movement.qty,
        "actor_id": movement.actor_id,
    }


def _create_validated(command: MovementCommand, *, actor_id, actor_role) -> InventoryMovement:
    movement = _retry_on_conflict(
        lambda: _apply_movement(command, actor_id=actor_id, actor_role=actor_role),
        product_id=command.product_id,
    )
    logger.info("inventory.movement_created", extra=_movement_log_extra(movement, "inventory.movement_created"))
    record_audit_event(
        action=AuditAction.MOVEMENT_CREATE,
        entity=AuditEntity.INVENTORY_MOVEMENT,
        entity_id=movement.id,
        actor_id=actor_id,
        meta={
            "product_id": movement.product_id,
            "type": str(movement.movement_type),
            "qty": movement.qty,
            "signed_qty": movement.signed_qty,
            "unit_price_cents": movement.unit_price_cents,
            "note": movement.note,
        },
    )
    return movement


def create_movement(*, command: MovementCommand, actor_id, actor_role) -> InventoryMovement:
    """Record one movement and update the product's cached stock atomically.

    Raises ``InvalidInput`` before touching the store, then ``ProductNotFound``,
    ``MovementForbidden``, ``InsufficientStock`` or ``StockConflict`` (after
    bounded retries). A failed call leaves ledger and stock unchanged.
    """
    command = validate_command(command)
    return _create_validated(command, actor_id=actor_id, actor_role=actor_role)


def create_bulk_movements(*, commands, actor_id, actor_role) -> BulkMovementResult:
    """Apply ``commands`` in order, each in its own transaction.

    Every command is validated up front. Processing stops at the first
    failing movement and raises ``BulkMovementFailed``; movements committed
    before it are kept (not compensated) and listed on the error.
    """
    commands = list(commands or [])
    if not commands:
        raise InvalidInput("At least one movement is required", errors={"movements": ["This list may not be empty."]})

    validated = []
    for index, command in enumerate(commands):
        try:
            validated.append(validate_command(command))
        except InvalidInput as exc:
            raise BulkMovementFailed(failed_index=index, cause=exc) from exc

    created: list[InventoryMovement] = []
    for index, command in enumerate(validated):
        try:
            created.append(_create_validated(command, actor_id=actor_id, actor_role=actor_role))
        except MovementError as exc:
            logger.warning(
                "inventory.bulk_movements_failed",
                extra={
                    "event": "inventory.bulk_movements_failed",
                    "failed_index": index,
                    "succeeded": len(created),
                    "error_code": exc.code,
                    "actor_id": actor_id,
                },
            )
            raise BulkMovementFailed(failed_index=index, cause=exc, created=created) from exc

    logger.info(
        "inventory.bulk_movements_created",
        extra={
            "event": "inventory.bulk_movements_created",
            "count": len(created),
            "movement_ids": [m.id for m in created],
            "actor_id": actor_id,
        },
    )
    return BulkMovementResult(movements=created, count=len(created))


def create_stock_adjustment(*, product_id, adjustment_qty: int, reason: str, actor_id) -> InventoryMovement:
    """Record a signed manual correction with a mandatory reason.

    The caller is responsible for having authorized the actor as OWNER.
    """
    reason = (reason or "").strip()
    if not reason:
        raise InvalidInput("Reason is required for stock adjustments", errors={"reason": ["This field is required."]})
    command = validate_command(
        MovementCommand(
            product_id=product_id,
            movement_type=MovementType.ADJUSTMENT,
            qty=adjustment_qty,
            note=reason,
        )
    )
    movement = _retry_on_conflict(
        lambda: _apply_movement(command, actor_id=actor_id, actor_role=Role.OWNER),
        product_id=command.product_id,
    )
    logger.info("inventory.stock_adjusted", extra=_movement_log_extra(movement, "inventory.stock_adjusted"))
    record_audit_event(
        action=AuditAction.STOCK_ADJUSTMENT,
        entity=AuditEntity.INVENTORY_MOVEMENT,
        entity_id=movement.id,
        actor_id=actor_id,
        meta={"product_id": movement.product_id, "adjustment_qty": movement.qty, "reason": movement.note},
    )
    return movement


@transaction.atomic
def _cancel_sale(movement_id: int, *, actor_id, actor_role) -> InventoryMovement:
    sale = InventoryMovement.objects.select_for_update().filter(id=movement_id).first()
    if sale is None:
        raise MovementNotFound("Movement not found", movement_id=str(movement_id))
    if sale.movement_type != MovementType.SALE_OFFLINE:
        raise InvalidInput(
            "Can only cancel SALE_OFFLINE movements",
            errors={"movement_id": ["Movement is not an offline sale."]},
        )
    if sale.reversals.exists():
        raise SaleAlreadyCancelled("Sale already cancelled", movement_id=str(sale.id))

    command = MovementCommand(
        product_id=sale.product_id,
        movement_type=MovementType.CANCEL_SALE,
        qty=abs(sale.qty),
        unit_price_cents=sale.unit_price_cents,
        note=f"Cancellation of sale movement {sale.id}",
    )
    try:
        return _apply_movement(command, actor_id=actor_id, actor_role=actor_role, reverses_id=sale.id)
    except IntegrityError:
        # Unique constraint on ``reverses``: another request cancelled it first
        raise SaleAlreadyCancelled("Sale already cancelled", movement_id=str(sale.id)) from None


def cancel_sale_movement(*, movement_id, actor_id, actor_role) -> InventoryMovement:
    """Append a CANCEL_SALE entry reversing an offline sale (OWNER only).

    The original sale stays untouched; a sale can be cancelled once.
    """
    if _role(actor_role) != Role.OWNER:
        raise MovementForbidden("Only owners can cancel sales", role=str(actor_role))
    try:
        movement_id = int(movement_id)
    except (TypeError, ValueError):
        raise MovementNotFound("Movement not found", movement_id=str(movement_id)) from None

    cancellation = _retry_on_conflict(
        lambda: _cancel_sale(movement_id, actor_id=actor_id, actor_role=actor_role),
        movement_id=movement_id,
    )
    logger.info(
        "inventory.sale_cancelled",
        extra={**_movement_log_extra(cancellation, "inventory.sale_cancelled"), "reverses_id": movement_id},
    )
    record_audit_event(
        action=AuditAction.MOVEMENT_CANCEL,
        entity=AuditEntity.INVENTORY_MOVEMENT,
        entity_id=cancellation.id,
        actor_id=actor_id,
        meta={
            "original_movement_id": movement_id,
            "product_id": cancellation.product_id,
            "cancelled_qty": cancellation.qty,
        },
    )
    return cancellation


# EOF

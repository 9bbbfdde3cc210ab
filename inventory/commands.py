"""Movement commands: validated input for the inventory services."""

from dataclasses import dataclass

from common.choices import MovementType

from .exceptions import InvalidInput
from .ledger import MAGNITUDE_TYPES

MAX_MOVEMENT_QTY = 2_147_483_647
MAX_ADJUSTMENT_QTY = 1000
MAX_NOTE_LENGTH = 500
PRICED_TYPES = frozenset({MovementType.SALE_OFFLINE, MovementType.CANCEL_SALE})


@dataclass(frozen=True)
class MovementCommand:
    product_id: int
    movement_type: str
    qty: int
    unit_price_cents: int | None = None
    note: str = ""


def _to_int(value, field: str) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or value is None:
        raise InvalidInput(f"{field} must be an integer", errors={field: ["Must be an integer."]})
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"{field} must be an integer", errors={field: ["Must be an integer."]}) from None


def validate_command(command: MovementCommand) -> MovementCommand:
    """Check a command before any store access and return a normalized copy.

    Raises ``InvalidInput`` for unknown types, quantities with the wrong sign
    or out of range, oversized notes, adjustments without a note, and unit
    prices on movement types that are not sales.
    """
    errors: dict[str, list[str]] = {}

    try:
        movement_type = MovementType(command.movement_type)
    except ValueError:
        raise InvalidInput(
            f"Unknown movement type: {command.movement_type}",
            errors={"type": [f"Must be one of: {', '.join(MovementType.values)}."]},
        ) from None

    product_id = _to_int(command.product_id, "product_id")
    qty = _to_int(command.qty, "qty")
    note = (command.note or "").strip()

    if movement_type in MAGNITUDE_TYPES:
        if qty < 1 or qty > MAX_MOVEMENT_QTY:
            errors.setdefault("qty", []).append("Quantity must be a positive integer.")
    else:
        if abs(qty) > MAX_ADJUSTMENT_QTY:
            errors.setdefault("qty", []).append(
                f"Adjustment must be between -{MAX_ADJUSTMENT_QTY} and {MAX_ADJUSTMENT_QTY}."
            )
        if not note:
            errors.setdefault("note", []).append("A note is required for adjustments.")

    if len(note) > MAX_NOTE_LENGTH:
        errors.setdefault("note", []).append(f"Note must be at most {MAX_NOTE_LENGTH} characters.")

    unit_price_cents = command.unit_price_cents
    if unit_price_cents is not None:
        unit_price_cents = _to_int(unit_price_cents, "unit_price_cents")
        if unit_price_cents < 0:
            errors.setdefault("unit_price_cents", []).append("Unit price cannot be negative.")
        if movement_type not in PRICED_TYPES:
            errors.setdefault("unit_price_cents", []).append("Unit price is only recorded on sales.")

    if errors:
        raise InvalidInput("Invalid movement", errors=errors)

    return MovementCommand(
        product_id=product_id,
        movement_type=movement_type,
        qty=qty,
        unit_price_cents=unit_price_cents,
        note=note,
    )

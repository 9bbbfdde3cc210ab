"""Sign rules for ledger entries.

``SIGN_BY_TYPE`` is the single table describing how each movement type
moves stock. ``signed_effect`` applies it in Python and
``signed_qty_expression`` applies it in SQL for aggregate reads.
"""

from common.choices import MovementType
from django.db.models import Case, F, IntegerField, Value, When
from django.db.models.functions import Abs

# Adjustments carry their own sign, so they apply qty as-is.
SIGN_BY_TYPE = {
    MovementType.SALE_OFFLINE: -1,
    MovementType.CANCEL_SALE: 1,
    MovementType.RETURN: 1,
    MovementType.LOSS: -1,
    MovementType.ADJUSTMENT: 1,
}

MAGNITUDE_TYPES = frozenset(
    {MovementType.SALE_OFFLINE, MovementType.CANCEL_SALE, MovementType.RETURN, MovementType.LOSS}
)


def signed_effect(entry) -> int:
    """Return the stock delta of ``entry`` (anything with ``movement_type`` and ``qty``)."""
    try:
        movement_type = MovementType(entry.movement_type)
    except ValueError:
        raise ValueError(f"Unknown movement type: {entry.movement_type}") from None
    qty = int(entry.qty)
    if movement_type in MAGNITUDE_TYPES:
        qty = abs(qty)
    return SIGN_BY_TYPE[movement_type] * qty


def _quantity(prefix, movement_type):
    qty = F(f"{prefix}qty")
    return Abs(qty) if movement_type in MAGNITUDE_TYPES else qty


def signed_qty_expression(prefix: str = ""):
    """ORM expression equal to ``signed_effect`` for each ``InventoryMovement`` row.

    ``prefix`` points at the movement relation when aggregating from another
    model, e.g. ``"movements__"`` from ``Product``.
    """
    return Case(
        *[
            When(**{f"{prefix}movement_type": movement_type}, then=_quantity(prefix, movement_type) * Value(sign))
            for movement_type, sign in SIGN_BY_TYPE.items()
        ],
        default=Value(0),
        output_field=IntegerField(),
    )

"""Serializers for inventory domain.

Write serializers validate request bodies and produce ``MovementCommand``
objects; read serializers shape ledger entries for the wire.
"""

from catalog.models import Product
from common.choices import MovementType
from rest_framework import serializers

from .commands import MAX_ADJUSTMENT_QTY, MAX_MOVEMENT_QTY, MAX_NOTE_LENGTH, MovementCommand
from .models import InventoryMovement


def _command_from(data) -> MovementCommand:
    return MovementCommand(
        product_id=data["product_id"],
        movement_type=data["type"],
        qty=data["qty"],
        unit_price_cents=data.get("unit_price_cents"),
        note=data.get("note", ""),
    )


class MovementCreateSerializer(serializers.Serializer):
    """Body of a single movement request.

    ``qty`` is a positive magnitude for every type except ADJUSTMENT, where
    it is a signed, non-zero delta and ``note`` is required.
    """

    product_id = serializers.IntegerField(min_value=1)
    type = serializers.ChoiceField(choices=MovementType.choices)
    qty = serializers.IntegerField(min_value=-MAX_ADJUSTMENT_QTY, max_value=MAX_MOVEMENT_QTY)
    unit_price_cents = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    note = serializers.CharField(max_length=MAX_NOTE_LENGTH, required=False, allow_blank=True, default="")

    def validate(self, attrs):
        if attrs["type"] == MovementType.ADJUSTMENT:
            if attrs["qty"] == 0 or attrs["qty"] > MAX_ADJUSTMENT_QTY:
                message = f"Adjustment must be non-zero and between -{MAX_ADJUSTMENT_QTY} and {MAX_ADJUSTMENT_QTY}."
                raise serializers.ValidationError({"qty": [message]})
            if not attrs.get("note", "").strip():
                raise serializers.ValidationError({"note": ["A note is required for adjustments."]})
        elif attrs["qty"] < 1:
            raise serializers.ValidationError({"qty": ["Quantity must be positive."]})
        return attrs

    def to_command(self) -> MovementCommand:
        return _command_from(self.validated_data)


class BulkMovementSerializer(serializers.Serializer):
    movements = MovementCreateSerializer(many=True, allow_empty=False)

    def to_commands(self) -> list[MovementCommand]:
        return [_command_from(item) for item in self.validated_data["movements"]]


class StockAdjustmentSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
    adjustment_qty = serializers.IntegerField(min_value=-MAX_ADJUSTMENT_QTY, max_value=MAX_ADJUSTMENT_QTY)
    reason = serializers.CharField(min_length=1, max_length=MAX_NOTE_LENGTH)

    def validate_adjustment_qty(self, value):
        if value == 0:
            raise serializers.ValidationError("Adjustment quantity cannot be zero.")
        return value


class MovementQuerySerializer(serializers.Serializer):
    """Query string of the movement list; filters are passed to the FilterSet."""

    product_id = serializers.IntegerField(min_value=1, required=False)
    type = serializers.ChoiceField(choices=MovementType.choices, required=False)
    actor_id = serializers.IntegerField(min_value=1, required=False)
    start_date = serializers.CharField(required=False)
    end_date = serializers.CharField(required=False)
    cursor = serializers.CharField(required=False)
    limit = serializers.IntegerField(min_value=1, max_value=100, required=False)

    def filters(self) -> dict:
        data = self.validated_data
        return {key: data.get(key) for key in ("product_id", "type", "actor_id", "start_date", "end_date")}


class InventoryMovementSerializer(serializers.ModelSerializer):
    """Read-only representation of a ledger entry; ids are opaque strings."""

    id = serializers.CharField(read_only=True)
    product_id = serializers.CharField(read_only=True)
    actor_id = serializers.CharField(read_only=True)
    reverses_id = serializers.CharField(read_only=True, allow_null=True)
    type = serializers.CharField(source="movement_type", read_only=True)
    note = serializers.SerializerMethodField()
    signed_qty = serializers.IntegerField(read_only=True)

    class Meta:
        model = InventoryMovement
        fields = [
            "id",
            "product_id",
            "type",
            "qty",
            "signed_qty",
            "unit_price_cents",
            "note",
            "actor_id",
            "reverses_id",
            "created_at",
        ]
        read_only_fields = fields

    def get_note(self, obj) -> str | None:
        return obj.note or None


class LowStockProductSerializer(serializers.ModelSerializer):
    id = serializers.CharField(read_only=True)

    class Meta:
        model = Product
        fields = ["id", "name", "sku", "stock_cached", "price_cents"]
        read_only_fields = fields


# EOF

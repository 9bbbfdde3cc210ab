"""Inventory ledger models.

``InventoryMovement`` is the append-only record of every stock-affecting
event. A product's cached stock is the sum of the signed effects of its
movements; rows are never edited or removed once written.
"""

from common.choices import MovementType
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from .ledger import signed_effect


class AppendOnlyError(ValidationError):
    """Raised on any attempt to modify or remove a ledger entry."""


class InventoryMovementQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise AppendOnlyError("Inventory movements are append-only and cannot be updated")

    def delete(self):
        raise AppendOnlyError("Inventory movements are append-only and cannot be deleted")

    def for_product(self, product_id):
        return self.filter(product_id=product_id)

    def newest_first(self):
        return self.order_by("-created_at", "-id")


class InventoryMovement(models.Model):
    TYPE_SALE_OFFLINE = MovementType.SALE_OFFLINE
    TYPE_CANCEL_SALE = MovementType.CANCEL_SALE
    TYPE_RETURN = MovementType.RETURN
    TYPE_LOSS = MovementType.LOSS
    TYPE_ADJUSTMENT = MovementType.ADJUSTMENT
    TYPE_CHOICES = MovementType.choices

    product = models.ForeignKey("catalog.Product", on_delete=models.PROTECT, related_name="movements")
    movement_type = models.CharField(max_length=16, choices=TYPE_CHOICES)
    # Magnitude for sale/cancel/return/loss; signed delta for adjustments
    qty = models.IntegerField()
    unit_price_cents = models.PositiveIntegerField(null=True, blank=True)
    note = models.CharField(max_length=500, blank=True)
    actor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="inventory_movements")
    reverses = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="reversals",
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    objects = InventoryMovementQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["reverses"],
                condition=models.Q(reverses__isnull=False),
                name="movement_reversed_at_most_once",
            ),
            models.CheckConstraint(
                name="movement_unit_price_non_negative",
                condition=models.Q(unit_price_cents__gte=0) | models.Q(unit_price_cents__isnull=True),
            ),
        ]
        indexes = [
            models.Index(fields=["product", "created_at"], name="movement_product_created_idx"),
            models.Index(fields=["actor", "created_at"], name="movement_actor_created_idx"),
            models.Index(fields=["movement_type", "created_at"], name="movement_type_created_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise AppendOnlyError("Inventory movements are append-only and cannot be updated")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise AppendOnlyError("Inventory movements are append-only and cannot be deleted")

    @property
    def signed_qty(self) -> int:
        return signed_effect(self)

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.movement_type} {self.qty} for {self.product_id}"


# EOF

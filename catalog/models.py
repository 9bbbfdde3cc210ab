"""Catalog app models.

The inventory core references products but does not own them. The only
stock-bearing field, ``stock_cached``, is written exclusively by the
inventory services alongside a ledger entry.
"""

from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Product(TimeStampedModel):
    """Sellable product with a denormalized running stock total."""

    name = models.CharField(max_length=200)
    sku = models.CharField(max_length=64, unique=True)
    price_cents = models.PositiveIntegerField(default=0)
    # Materialized sum of the product's ledger entries; see inventory.services
    stock_cached = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True, db_index=True)
    is_archived = models.BooleanField(default=False, db_index=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(name="product_stock_non_negative", condition=models.Q(stock_cached__gte=0)),
        ]
        indexes = [
            models.Index(fields=["is_active", "is_archived", "stock_cached"], name="product_stock_report_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.name} [{self.sku}]"

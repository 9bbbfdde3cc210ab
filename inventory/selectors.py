"""Selectors for the inventory ledger (read-only)."""

from dataclasses import dataclass, field

from catalog.models import Product
from django.conf import settings
from django.db.models import Q, Sum
from django.db.models.functions import Coalesce

from .exceptions import InvalidInput
from .filters import MovementFilterSet
from .ledger import signed_qty_expression
from .models import InventoryMovement


@dataclass(frozen=True)
class MovementPage:
    items: list = field(default_factory=list)
    next_cursor: str | None = None
    has_more: bool = False


@dataclass(frozen=True)
class StockDrift:
    product_id: int
    sku: str
    stock_cached: int
    ledger_total: int


def _resolve_limit(limit) -> int:
    default = int(getattr(settings, "INVENTORY_MOVEMENTS_PAGE_SIZE", 20))
    maximum = int(getattr(settings, "INVENTORY_MOVEMENTS_MAX_PAGE_SIZE", 100))
    if limit is None:
        return default
    try:
        limit = int(limit)
    except (TypeError, ValueError):
        raise InvalidInput("Invalid limit", errors={"limit": ["Must be an integer."]}) from None
    if limit < 1 or limit > maximum:
        raise InvalidInput("Invalid limit", errors={"limit": [f"Must be between 1 and {maximum}."]})
    return limit


def _apply_cursor(qs, cursor):
    try:
        cursor_id = int(cursor)
    except (TypeError, ValueError):
        raise InvalidInput("Invalid cursor", errors={"cursor": ["Unknown cursor."]}) from None
    anchor = InventoryMovement.objects.filter(id=cursor_id).values("id", "created_at").first()
    if anchor is None:
        raise InvalidInput("Invalid cursor", errors={"cursor": ["Unknown cursor."]})
    return qs.filter(
        Q(created_at__lt=anchor["created_at"]) | Q(created_at=anchor["created_at"], id__lt=anchor["id"])
    )


def get_movements(*, filters: dict | None = None, cursor=None, limit=None) -> MovementPage:
    """Return one newest-first page of ledger entries matching ``filters``.

    ``cursor`` is the id of the last entry of the previous page; the page
    holds entries strictly older than it in (created_at, id) order.
    """
    limit = _resolve_limit(limit)
    data = {key: value for key, value in (filters or {}).items() if value not in (None, "")}
    filterset = MovementFilterSet(data=data, queryset=InventoryMovement.objects.all())
    if not filterset.is_valid():
        raise InvalidInput("Invalid filters", errors={k: [str(e) for e in v] for k, v in filterset.errors.items()})

    qs = filterset.qs.select_related("product", "actor").newest_first()
    if cursor not in (None, ""):
        qs = _apply_cursor(qs, cursor)

    rows = list(qs[: limit + 1])
    has_more = len(rows) > limit
    items = rows[:limit]
    next_cursor = str(items[-1].id) if has_more else None
    return MovementPage(items=items, next_cursor=next_cursor, has_more=has_more)


def ledger_stock_for_product(product_id) -> int:
    """Sum of signed effects of all ledger entries for ``product_id``."""
    total = InventoryMovement.objects.for_product(product_id).aggregate(total=Coalesce(Sum(signed_qty_expression()), 0))
    return int(total["total"])


def find_stock_drift() -> list[StockDrift]:
    """Products whose cached stock disagrees with their ledger total."""
    products = Product.objects.annotate(
        ledger_total=Coalesce(Sum(signed_qty_expression("movements__")), 0)
    ).order_by("id")
    return [
        StockDrift(product_id=p.id, sku=p.sku, stock_cached=int(p.stock_cached), ledger_total=int(p.ledger_total))
        for p in products
        if int(p.stock_cached) != int(p.ledger_total)
    ]


def low_stock_products(*, threshold=None):
    """Active, non-archived products at or below ``threshold``, lowest stock first."""
    if threshold is None:
        threshold = getattr(settings, "INVENTORY_LOW_STOCK_THRESHOLD", 5)
    try:
        threshold = int(threshold)
    except (TypeError, ValueError):
        raise InvalidInput("Invalid threshold", errors={"threshold": ["Must be an integer."]}) from None
    if threshold < 0:
        raise InvalidInput("Invalid threshold", errors={"threshold": ["Must be zero or greater."]})
    return list(
        Product.objects.filter(is_active=True, is_archived=False, stock_cached__lte=threshold).order_by(
            "stock_cached", "name", "id"
        )
    )


# EOF

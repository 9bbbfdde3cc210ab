"""Stock projection: the pure decision of whether a movement may be applied."""

from .exceptions import InsufficientStock
from .ledger import signed_effect


def project(current_stock: int, entry, *, product_id) -> int:
    """Return the stock that results from applying ``entry`` to ``current_stock``.

    Raises ``InsufficientStock`` when the result would be negative. The floor
    is always enforced here; callers that want to warn about negative
    results must check before calling.
    """
    delta = signed_effect(entry)
    new_stock = int(current_stock) + delta
    if new_stock < 0:
        raise InsufficientStock(product_id=product_id, requested=abs(delta), available=int(current_stock))
    return new_stock

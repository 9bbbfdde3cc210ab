import threading

import pytest
from catalog.models import Product
from common.choices import MovementType, Role
from django.db import close_old_connections, connection
from inventory.commands import MovementCommand
from inventory.exceptions import InsufficientStock, SaleAlreadyCancelled
from inventory.selectors import ledger_stock_for_product
from inventory.services import cancel_sale_movement, create_movement

pytestmark = [
    pytest.mark.django_db(transaction=True),
    pytest.mark.skipif(connection.vendor == "sqlite", reason="row locks need a server database"),
]


def run_concurrently(count, target):
    barrier = threading.Barrier(count)
    outcomes = []
    lock = threading.Lock()

    def worker():
        barrier.wait()
        try:
            result = target()
        except Exception as exc:  # noqa: BLE001
            result = exc
        finally:
            close_old_connections()
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=worker) for _ in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return outcomes


def test_parallel_sales_never_oversell(stocked_product, staff):
    product = stocked_product(5)
    command = MovementCommand(product_id=product.id, movement_type=MovementType.SALE_OFFLINE, qty=1)

    outcomes = run_concurrently(
        8, lambda: create_movement(command=command, actor_id=staff.id, actor_role=Role.STAFF)
    )

    failures = [o for o in outcomes if isinstance(o, Exception)]
    assert len(outcomes) - len(failures) == 5
    assert all(isinstance(o, InsufficientStock) for o in failures)
    assert Product.objects.get(id=product.id).stock_cached == 0
    assert ledger_stock_for_product(product.id) == 0


def test_parallel_cancellations_reverse_once(stocked_product, staff, owner):
    product = stocked_product(5)
    sale = create_movement(
        command=MovementCommand(product_id=product.id, movement_type=MovementType.SALE_OFFLINE, qty=2),
        actor_id=staff.id,
        actor_role=Role.STAFF,
    )

    outcomes = run_concurrently(
        4, lambda: cancel_sale_movement(movement_id=sale.id, actor_id=owner.id, actor_role=Role.OWNER)
    )

    failures = [o for o in outcomes if isinstance(o, Exception)]
    assert len(failures) == 3
    assert all(isinstance(o, SaleAlreadyCancelled) for o in failures)
    assert Product.objects.get(id=product.id).stock_cached == 5


# EOF

import pytest
from catalog.models import Product
from django.core.management import call_command
from django.core.management.base import CommandError
from inventory.selectors import find_stock_drift


@pytest.mark.django_db
def test_consistent_ledger_reports_success(stocked_product, capsys):
    stocked_product(5)
    stocked_product(0)

    assert find_stock_drift() == []
    call_command("verify_stock")
    assert "matches the ledger" in capsys.readouterr().out


@pytest.mark.django_db
def test_drift_is_reported_not_repaired(stocked_product, capsys):
    product = stocked_product(5)
    Product.objects.filter(id=product.id).update(stock_cached=9)

    drifts = find_stock_drift()
    assert [(d.product_id, d.stock_cached, d.ledger_total) for d in drifts] == [(product.id, 9, 5)]

    with pytest.raises(CommandError):
        call_command("verify_stock")
    assert product.sku in capsys.readouterr().out
    assert Product.objects.get(id=product.id).stock_cached == 9


# EOF

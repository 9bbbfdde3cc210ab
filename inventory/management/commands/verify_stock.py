from django.core.management.base import BaseCommand, CommandError
from inventory.selectors import find_stock_drift


class Command(BaseCommand):
    help = "Compare every product's cached stock with the sum of its ledger entries. Reports only, never repairs."

    def handle(self, *args, **options):
        drifts = find_stock_drift()
        for drift in drifts:
            self.stdout.write(
                f"Product {drift.product_id} ({drift.sku}): cached={drift.stock_cached} ledger={drift.ledger_total}"
            )
        if drifts:
            raise CommandError(f"Stock drift detected on {len(drifts)} product(s)")
        self.stdout.write(self.style.SUCCESS("Cached stock matches the ledger for all products"))

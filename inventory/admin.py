"""Admin registrations for inventory app.

The ledger is append-only, so the admin is a read-only browser.
"""

from django.contrib import admin

from .models import InventoryMovement


@admin.register(InventoryMovement)
class InventoryMovementAdmin(admin.ModelAdmin):
    list_display = ("id", "product", "movement_type", "qty", "unit_price_cents", "actor", "created_at")
    list_filter = ("movement_type",)
    search_fields = ("product__sku", "product__name", "note")
    list_select_related = ("product", "actor")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# EOF

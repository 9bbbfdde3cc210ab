from django.urls import path

from .views import (
    BulkMovementView,
    CancelSaleView,
    InventoryHealthView,
    LowStockView,
    MovementListCreateView,
    StockAdjustmentView,
)

urlpatterns = [
    path("health/", InventoryHealthView.as_view(), name="inventory-health"),
    path("movements/", MovementListCreateView.as_view(), name="movement-list"),
    path("movements/bulk/", BulkMovementView.as_view(), name="movement-bulk"),
    path("movements/adjust-stock/", StockAdjustmentView.as_view(), name="movement-adjust-stock"),
    path("movements/<int:movement_id>/cancel/", CancelSaleView.as_view(), name="movement-cancel"),
    path("low-stock/", LowStockView.as_view(), name="low-stock"),
]

# EOF

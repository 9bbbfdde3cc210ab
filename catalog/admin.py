"""Admin registrations for catalog app."""

from django.contrib import admin

from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "sku", "price_cents", "stock_cached", "is_active", "is_archived")
    list_filter = ("is_active", "is_archived")
    search_fields = ("name", "sku")
    # Stock only moves through inventory movements
    readonly_fields = ("stock_cached", "created_at", "updated_at")


# EOF

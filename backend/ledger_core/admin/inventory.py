from django.contrib import admin

from ledger_core.models import InventoryItem, StockMovement
from .mixins import TenantAdminMixin
from .readonly import ReadOnlyAdmin


@admin.register(InventoryItem)
class InventoryItemAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("item_code", "name", "category", "current_stock", "uom",
                    "location", "is_below_reorder_level", "is_active")
    list_filter = ("category", "is_active")
    search_fields = ("item_code", "sku", "name")
    # Balances move only through stock movements
    readonly_fields = ("item_code", "opening_stock", "current_stock",
                       "created_at", "updated_at")

    # Items get their code and opening ledger from create_inventory_item
    def has_add_permission(self, request):
        return False

    @admin.display(boolean=True, description="Reorder")
    def is_below_reorder_level(self, obj):
        return obj.is_below_reorder_level


@admin.register(StockMovement)
class StockMovementAdmin(ReadOnlyAdmin):
    list_display = ("movement_code", "item", "movement_type", "quantity",
                    "previous_stock", "new_stock", "recorded_by", "created_at")
    list_filter = ("movement_type",)
    search_fields = ("movement_code", "item__item_code", "reference")
    list_select_related = ("item", "recorded_by")

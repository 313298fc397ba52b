from decimal import Decimal
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .entitymembership import Company
from .location import Location

ITEM_CATEGORY_CHOICES = [
    ("RAW_MATERIAL", "Raw material (fibre, cotton bales)"),
    ("YARN", "Yarn"),
    ("FABRIC", "Fabric"),
    ("DYES_CHEMICALS", "Dyes & chemicals"),
    ("ACCESSORIES", "Trims & accessories"),
    ("SEMI_FINISHED", "Semi-finished"),
    ("FINISHED_GOODS", "Finished goods (garments)"),
    ("PACKAGING", "Packaging"),
    ("OTHER", "Other"),
]

MOVEMENT_TYPE_CHOICES = [
    ("RECEIPT", "Receipt"),          # stock in (purchase, production output)
    ("ISSUE", "Issue"),              # stock out (sale, issue to production)
    ("TRANSFER", "Transfer"),        # location change only, quantity untouched
    ("ADJUSTMENT", "Adjustment"),    # physical count, absolute level
    ("RETURN", "Return"),            # stock back in
]


# ---------- Inventory items ----------
class InventoryItem(models.Model):  # Something a company stocks

    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    # Where the stock currently sits; TRANSFER movements re-home it
    location = models.ForeignKey(
        Location,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="items",
    )

    # Human-readable sequential code (ITM0001), issued per company
    item_code = models.CharField(max_length=20)
    # Optional supplier / barcode style code
    sku = models.CharField(max_length=80, null=True, blank=True)
    name = models.CharField(max_length=200)
    category = models.CharField(
        max_length=20, choices=ITEM_CATEGORY_CHOICES, default="OTHER"
    )
    # Textile attributes are free text: yarn count "40s", fabric GSM, shade...
    description = models.TextField(blank=True)
    uom = models.CharField(max_length=16, default="KG")  # KG, MTR, PCS, ROLL

    # Stock at the moment the item was created; the ledger starts here
    opening_stock = models.DecimalField(
        max_digits=14, decimal_places=4, default=Decimal("0")
    )
    # Cached running balance, only ever written by services.stock
    current_stock = models.DecimalField(
        max_digits=14, decimal_places=4, default=Decimal("0")
    )
    reorder_level = models.DecimalField(
        max_digits=14, decimal_places=4, null=True, blank=True
    )
    unit_cost = models.DecimalField(
        max_digits=18, decimal_places=4, default=Decimal("0.00")
    )

    # Soft delete flag, items with movements are never hard deleted
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "name"], name="item_company_name_idx"),
            models.Index(fields=["company", "category"], name="item_company_category_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "item_code"], name="uq_company_item_code"
            ),
            # Ensure each SKU is unique within a company
            models.UniqueConstraint(
                fields=["company", "sku"], name="uq_company_item_sku"
            ),
            models.CheckConstraint(
                condition=models.Q(current_stock__gte=0)
                & models.Q(opening_stock__gte=0),
                name="item_non_negative_stock",
            ),
        ]

    def __str__(self):
        return f"{self.item_code} {self.name}"

    @property
    def is_below_reorder_level(self):
        return self.reorder_level is not None and self.current_stock <= self.reorder_level

    def clean(self):
        # Can’t keep company A's item in company B's warehouse
        if self.location_id and self.location.company_id != self.company_id:
            raise ValidationError(
                "Location must belong to the same company as the item.")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)


# ---------- Stock movements (append-only) ----------
class StockMovement(models.Model):
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    movement_code = models.CharField(max_length=20)  # MOV0001

    item = models.ForeignKey(
        InventoryItem,
        # an item with history can't be deleted, only deactivated
        on_delete=models.PROTECT,
        related_name="movements",
    )
    movement_type = models.CharField(max_length=20, choices=MOVEMENT_TYPE_CHOICES)

    # Always positive, direction comes from movement_type
    # (for ADJUSTMENT this is the counted level)
    quantity = models.DecimalField(max_digits=14, decimal_places=4)

    # Snapshot of the item's balance around this movement
    previous_stock = models.DecimalField(max_digits=14, decimal_places=4)
    new_stock = models.DecimalField(max_digits=14, decimal_places=4)

    from_location = models.ForeignKey(
        Location, null=True, blank=True, on_delete=models.PROTECT,
        related_name="outgoing_movements",
    )
    to_location = models.ForeignKey(
        Location, null=True, blank=True, on_delete=models.PROTECT,
        related_name="incoming_movements",
    )

    unit_cost = models.DecimalField(
        max_digits=18, decimal_places=4, null=True, blank=True
    )
    reference = models.CharField(max_length=100, blank=True)  # PO / SO / lot no.
    notes = models.TextField(blank=True)

    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL
    )
    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        ordering = ("created_at", "id")
        indexes = [
            models.Index(fields=["company", "item"], name="movement_company_item_idx"),
            models.Index(fields=["company", "movement_type"], name="movement_company_type_idx"),
            models.Index(fields=["company", "created_at"], name="movement_company_created_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "movement_code"], name="uq_company_movement_code"
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="movement_positive_quantity",
            ),
            models.CheckConstraint(
                condition=models.Q(new_stock__gte=0),
                name="movement_non_negative_result",
            ),
        ]

    def __str__(self):
        return f"{self.movement_code} {self.movement_type} {self.quantity} of {self.item_id}"

    @property
    def signed_effect(self):
        """Change this movement applied to the item's current_stock."""
        return self.new_stock - self.previous_stock

    def clean(self):
        if self.item_id and self.item.company_id != self.company_id:
            raise ValidationError("StockMovement.company must match Item.company")

    def save(self, *args, **kwargs):
        # Movements are history: never rewritten once stored
        if not self._state.adding:
            raise ValidationError("Stock movements are immutable.")
        self.full_clean()
        return super().save(*args, **kwargs)

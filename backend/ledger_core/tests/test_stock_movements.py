from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import ProtectedError
from django.test import TestCase

from ..exceptions import InsufficientStockError, InvalidInputError, NotFoundError
from ..models import AuditLog, InventoryItem, StockMovement
from ..services import (create_inventory_item, deactivate_inventory_item,
                        record_stock_movement, verify_ledgers)
from .base import TenantSetupMixin


class StockMovementTests(TenantSetupMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.item = create_inventory_item(
            self.company, "Grey fabric 60 GSM", user=self.user, category="FABRIC",
            uom="MTR", opening_stock=Decimal("100"), location=self.warehouse)

    def stock(self):
        self.item.refresh_from_db()
        return self.item.current_stock

    def test_receipt_issue_adjustment_sequence(self):
        record_stock_movement(self.company, self.item.item_code, "RECEIPT", Decimal("50"),
                              user=self.user)
        self.assertEqual(self.stock(), Decimal("150"))

        # Issue beyond stock is rejected and nothing changes
        with self.assertRaises(InsufficientStockError):
            record_stock_movement(self.company, self.item.item_code, "ISSUE", Decimal("200"))
        self.assertEqual(self.stock(), Decimal("150"))
        self.assertEqual(StockMovement.objects.filter(item=self.item).count(), 1)

        # Adjustment is the counted level, not a delta
        movement = record_stock_movement(
            self.company, self.item.item_code, "ADJUSTMENT", Decimal("80"))
        self.assertEqual(self.stock(), Decimal("80"))
        self.assertEqual(movement.previous_stock, Decimal("150"))
        self.assertEqual(movement.new_stock, Decimal("80"))
        self.assertEqual(movement.signed_effect, Decimal("-70"))

    def test_ledger_balances_after_movements(self):
        for kind, qty in (("RECEIPT", "40"), ("ISSUE", "25.5"), ("RETURN", "3"),
                          ("ADJUSTMENT", "110"), ("ISSUE", "10")):
            record_stock_movement(self.company, self.item.item_code, kind, qty)

        effects = sum(m.signed_effect for m in self.item.movements.all())
        self.assertEqual(self.stock(), self.item.opening_stock + effects)
        self.assertEqual(self.stock(), Decimal("100"))
        self.assertEqual(verify_ledgers(self.company), [])

    def test_codes_are_sequential_per_company(self):
        first = record_stock_movement(self.company, self.item.item_code, "RECEIPT", 1)
        second = record_stock_movement(self.company, self.item.item_code, "RECEIPT", 1)
        self.assertEqual(self.item.item_code, "ITM0001")
        self.assertEqual((first.movement_code, second.movement_code), ("MOV0001", "MOV0002"))

    def test_transfer_rehomes_item_without_changing_quantity(self):
        movement = record_stock_movement(
            self.company, self.item.item_code, "TRANSFER", Decimal("100"),
            to_location=self.factory.pk)
        self.assertEqual(self.stock(), Decimal("100"))
        self.assertEqual(self.item.location, self.factory)
        self.assertEqual(movement.from_location, self.warehouse)
        self.assertEqual(movement.to_location, self.factory)

    def test_transfer_requires_destination(self):
        with self.assertRaises(InvalidInputError):
            record_stock_movement(self.company, self.item.item_code, "TRANSFER", 1)
        with self.assertRaises(InvalidInputError):
            # already there
            record_stock_movement(self.company, self.item.item_code, "TRANSFER", 1,
                                  to_location=self.warehouse)
        self.assertFalse(StockMovement.objects.exists())

    def test_quantity_must_be_positive(self):
        for qty in (0, -5, "abc"):
            with self.assertRaises(InvalidInputError):
                record_stock_movement(self.company, self.item.item_code, "RECEIPT", qty)
        self.assertEqual(self.stock(), Decimal("100"))

    def test_unknown_item_and_inactive_item_are_not_found(self):
        with self.assertRaises(NotFoundError):
            record_stock_movement(self.company, "ITM9999", "RECEIPT", 1)

        deactivate_inventory_item(self.company, self.item.item_code)
        with self.assertRaises(NotFoundError) as exc:
            record_stock_movement(self.company, self.item.item_code, "RECEIPT", 1)
        self.assertEqual(exc.exception.status_code, 404)

    def test_movement_writes_audit_row(self):
        movement = record_stock_movement(
            self.company, self.item.item_code, "ISSUE", 30, user=self.user, reference="SO-17")
        log = AuditLog.objects.get(action="record_movement")
        self.assertEqual(log.object_id, str(movement.pk))
        self.assertEqual(log.user, self.user)
        self.assertEqual(log.changes["new_stock"], str(movement.new_stock))

    def test_movements_are_immutable_and_items_protected(self):
        movement = record_stock_movement(self.company, self.item.item_code, "RECEIPT", 5)
        movement.quantity = Decimal("500")
        with self.assertRaises(ValidationError):
            movement.save()
        with self.assertRaises(ValidationError), transaction.atomic():
            movement.delete()
        # PROTECT: an item with history can only be deactivated
        with self.assertRaises(ProtectedError), transaction.atomic():
            InventoryItem.objects.filter(pk=self.item.pk).delete()
        self.assertTrue(InventoryItem.objects.filter(pk=self.item.pk).exists())

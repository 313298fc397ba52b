from decimal import Decimal

from django.test import TestCase

from ..exceptions import InvalidInputError
from ..models import Invoice, InventoryItem, PettyCashAccount
from ..services import (cancel_payment, create_bill, create_inventory_item,
                        create_invoice, create_petty_cash_account,
                        create_petty_cash_transaction, document_summary,
                        payment_summary, petty_cash_summary,
                        receive_bill, record_bill_payment,
                        record_invoice_payment, record_stock_movement,
                        send_invoice, stock_movement_summary, verify_ledgers)
from .base import TenantSetupMixin


class SummaryTests(TenantSetupMixin, TestCase):
    def test_stock_movement_summary(self):
        item = create_inventory_item(self.company, "Viscose", opening_stock=10)
        record_stock_movement(self.company, item.item_code, "RECEIPT", 40, unit_cost="2.50")
        record_stock_movement(self.company, item.item_code, "ISSUE", 15)
        record_stock_movement(self.company, item.item_code, "ADJUSTMENT", 30, unit_cost="2.50")

        summary = stock_movement_summary(self.company)
        self.assertEqual(summary["incoming"], Decimal("40"))
        # 15 issued plus 5 written off by the count
        self.assertEqual(summary["outgoing"], Decimal("20"))
        self.assertEqual(summary["net"], Decimal("20"))
        self.assertEqual(summary["by_type"]["RECEIPT"]["total_value"], Decimal("100"))
        self.assertEqual(summary["by_type"]["ISSUE"]["total_quantity"], Decimal("15"))
        # a count records a level, not goods moved
        self.assertEqual(summary["by_type"]["ADJUSTMENT"]["total_quantity"], Decimal("30"))
        self.assertEqual(summary["by_type"]["ADJUSTMENT"]["total_value"], 0)

    def test_petty_cash_summary(self):
        create_petty_cash_account(self.company, "Gate", initial_balance=300)
        create_petty_cash_account(self.company, "Office", initial_balance=200)
        create_petty_cash_transaction(self.company, "PCA001", "DISBURSEMENT", 50)
        create_petty_cash_transaction(self.company, "PCA002", "ADJUSTMENT", "-20")

        summary = petty_cash_summary(self.company)
        self.assertEqual(summary["account_count"], 2)
        self.assertEqual(summary["total_balance"], Decimal("430"))
        self.assertEqual(summary["total_initial_balance"], Decimal("500"))
        self.assertEqual(summary["by_type"]["ADJUSTMENT"]["amount"], Decimal("20"))
        self.assertEqual(summary["by_type"]["ADJUSTMENT"]["net_effect"], Decimal("-20"))

        only_gate = petty_cash_summary(self.company, "PCA001")
        self.assertEqual(only_gate["total_balance"], Decimal("250"))
        self.assertNotIn("ADJUSTMENT", only_gate["by_type"])

    def test_payment_and_document_summaries(self):
        invoice = create_invoice(self.company, 1000, customer=self.customer)
        send_invoice(self.company, invoice.invoice_number)
        bill = create_bill(self.company, 700, supplier=self.supplier)
        receive_bill(self.company, bill.bill_number)

        record_invoice_payment(self.company, invoice.invoice_number, 250)
        cancelled, _ = record_invoice_payment(self.company, invoice.invoice_number, 100)
        cancel_payment(self.company, cancelled.payment_code)
        record_bill_payment(self.company, bill.bill_number, 700)

        payments = payment_summary(self.company)
        self.assertEqual(payments["by_status"]["COMPLETED"]["count"], 2)
        self.assertEqual(payments["by_status"]["CANCELLED"]["amount"], Decimal("100"))
        self.assertEqual(payments["by_reference_type"]["INVOICE"]["amount"], Decimal("250"))
        self.assertEqual(payments["by_reference_type"]["BILL"]["count"], 1)

        receivables = document_summary(self.company, "invoice")
        self.assertEqual(receivables["outstanding"], Decimal("750"))
        self.assertEqual(receivables["by_status"]["PARTIALLY_PAID"]["count"], 1)
        payables = document_summary(self.company, "bill")
        self.assertEqual(payables["by_status"]["PAID"]["paid"], Decimal("700"))

        with self.assertRaises(InvalidInputError):
            document_summary(self.company, "quote")

    def test_empty_company_reports_zeroes(self):
        self.assertEqual(stock_movement_summary(self.company)["net"], 0)
        self.assertEqual(document_summary(self.company, "invoice")["total"], 0)
        self.assertEqual(petty_cash_summary(self.company)["account_count"], 0)


class VerifyLedgerTests(TenantSetupMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.item = create_inventory_item(self.company, "Lycra", opening_stock=20)
        record_stock_movement(self.company, self.item.item_code, "ISSUE", 5)
        self.invoice = create_invoice(self.company, 500, customer=self.customer)
        send_invoice(self.company, self.invoice.invoice_number)
        record_invoice_payment(self.company, self.invoice.invoice_number, 200)
        create_petty_cash_account(self.company, "Float", initial_balance=100)
        create_petty_cash_transaction(self.company, "PCA001", "DISBURSEMENT", 40)

    def test_clean_ledgers(self):
        self.assertEqual(verify_ledgers(self.company), [])

    def test_detects_drift(self):
        # Bypass the services with queryset updates
        InventoryItem.objects.filter(pk=self.item.pk).update(current_stock=Decimal("99"))
        Invoice.objects.filter(pk=self.invoice.pk).update(amount_paid=Decimal("0"))
        PettyCashAccount.objects.filter(account_code="PCA001").update(
            current_balance=Decimal("100"))

        with self.assertLogs("ledger_core.services.reporting", level="WARNING"):
            problems = verify_ledgers(self.company)

        found = {(p["entity"], p["field"]): p for p in problems}
        self.assertEqual(found[("InventoryItem", "current_stock")]["expected"], Decimal("15"))
        self.assertEqual(found[("Invoice", "amount_paid")]["expected"], Decimal("200"))
        # balance_due (300) no longer matches total - amount_paid (500)
        self.assertIn(("Invoice", "balance_due"), found)
        self.assertEqual(found[("PettyCashAccount", "current_balance")]["expected"],
                         Decimal("60"))
        self.assertEqual(len(problems), 4)

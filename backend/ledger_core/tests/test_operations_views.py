from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from .. import operations
from ..exceptions import InvalidInputError
from ..models import Payment
from ..services import (create_expense, create_inventory_item, create_invoice,
                        create_petty_cash_account, send_invoice)
from .base import TenantSetupMixin


class OperationTests(TenantSetupMixin, TestCase):
    """The named operations take plain dicts and return plain dicts."""

    def setUp(self):
        super().setUp()
        create_inventory_item(self.company, "Cotton bale", opening_stock=100,
                              location=self.warehouse)

    def test_record_movement_returns_plain_values(self):
        result = operations.record_movement(
            self.company.pk,
            {"item_code": "ITM0001", "movement_type": "TRANSFER", "quantity": "100",
             "to_location": self.factory.pk},
            user_id=self.user.pk)
        self.assertEqual(result["movement"]["movement_code"], "MOV0001")
        self.assertEqual(result["movement"]["to_location"], self.factory.pk)
        self.assertEqual(result["item"]["location"], self.factory.pk)
        self.assertIsInstance(result["item"]["current_stock"], str)

    def test_payload_shape_errors(self):
        with self.assertRaises(InvalidInputError) as exc:
            operations.record_movement(
                self.company.pk, {"item_code": "ITM0001", "movement_type": "LOAN",
                                  "quantity": "1"})
        self.assertEqual(exc.exception.detail["field"], "movement_type")

        with self.assertRaises(InvalidInputError):
            operations.summarize(self.company.pk, {
                "report": "payments", "from_date": "2026-05-01", "to_date": "2026-04-01"})

    def test_summarize_verify(self):
        result = operations.summarize(self.company.pk, {"report": "verify"})
        self.assertEqual(result, {"report": "verify", "data": []})

    def test_summarize_stock_movements(self):
        operations.record_movement(
            self.company.pk,
            {"item_code": "ITM0001", "movement_type": "RECEIPT", "quantity": "25",
             "unit_cost": "4.00"},
            user_id=self.user.pk)
        result = operations.summarize(
            self.company.pk, {"report": "stock_movements"}, self.user.pk)
        receipts = result["data"]["by_type"]["RECEIPT"]
        self.assertEqual(receipts["count"], 1)
        self.assertEqual(Decimal(receipts["total_quantity"]), Decimal("25"))
        self.assertEqual(Decimal(receipts["total_value"]), Decimal("100"))
        self.assertEqual(Decimal(result["data"]["net"]), Decimal("25"))

    def test_record_payment_normalises_receipt_url(self):
        invoice = create_invoice(self.company, 500, customer=self.customer)
        send_invoice(self.company, invoice.invoice_number)
        result = operations.record_payment(
            self.company.pk,
            {"reference_type": "INVOICE", "document_number": invoice.invoice_number,
             "amount": "200", "payment_method": "UPI", "transaction_ref": "UPI-99812",
             "receipt_url": "receipts.example.com/inv0001.pdf"},
            user_id=self.user.pk)
        payment = Payment.objects.get(payment_code=result["payment"]["payment_code"])
        self.assertEqual(payment.receipt_url, "https://receipts.example.com/inv0001.pdf")
        self.assertEqual(result["document"]["last_payment_method"], "UPI")
        self.assertEqual(result["document"]["last_payment_ref"], "UPI-99812")


class LedgerViewTests(TenantSetupMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.client.force_login(self.user)
        create_inventory_item(self.company, "Cotton bale", opening_stock=100)
        invoice = create_invoice(self.company, 1000, customer=self.customer)
        send_invoice(self.company, invoice.invoice_number)
        create_petty_cash_account(self.company, "Float", initial_balance=1000,
                                  min_balance=500)
        create_expense(self.company, "Security wages", "SALARIES", 9000)

    def post(self, name, payload):
        return self.client.post(reverse(f"ledger:{name}"), payload,
                                content_type="application/json")

    def test_record_movement(self):
        response = self.post("record-movement", {
            "item_code": "ITM0001", "movement_type": "ISSUE", "quantity": "30"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["ok"])
        self.assertEqual(Decimal(body["item"]["current_stock"]), Decimal("70"))

    def test_insufficient_stock_is_400(self):
        response = self.post("record-movement", {
            "item_code": "ITM0001", "movement_type": "ISSUE", "quantity": "130"})
        self.assertEqual(response.status_code, 400)
        error = response.json()["error"]
        self.assertEqual(error["kind"], "insufficient_stock")
        self.assertEqual(Decimal(error["available"]), Decimal("100"))

    def test_unknown_item_is_404(self):
        response = self.post("record-movement", {
            "item_code": "ITM0404", "movement_type": "RECEIPT", "quantity": "1"})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"]["kind"], "not_found")

    def test_payment_and_cancel(self):
        response = self.post("record-payment", {
            "reference_type": "INVOICE", "document_number": "INV0001",
            "amount": "600", "payment_method": "BANK_TRANSFER",
            "transaction_ref": "UTR123"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["document"]["status"], "PARTIALLY_PAID")
        self.assertEqual(Decimal(body["document"]["balance_due"]), Decimal("400"))

        response = self.post("cancel-payment", {
            "payment_code": body["payment"]["payment_code"], "reason": "wrong UTR"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["document"]["status"], "SENT")

        response = self.post("record-payment", {
            "reference_type": "INVOICE", "document_number": "INV0001", "amount": "1500"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"]["kind"], "exceeds_balance")

    def test_petty_cash_warning(self):
        response = self.post("petty-cash-transaction", {
            "account_code": "PCA001", "transaction_type": "DISBURSEMENT",
            "amount": "600", "description": "Diesel for genset"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertIn("below the minimum balance", body["warning"])
        self.assertEqual(Decimal(body["account"]["current_balance"]), Decimal("400"))

    def test_expense_status(self):
        response = self.post("expense-status", {"expense_code": "EXP0001", "status": "PAID"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"]["kind"], "illegal_transition")

        response = self.post("expense-status", {"expense_code": "EXP0001",
                                                "status": "APPROVED"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["expense"]["approved_by"], self.user.pk)

    def test_summary(self):
        response = self.client.get(reverse("ledger:summary", args=["receivables"]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["count"], 1)

        response = self.client.get(reverse("ledger:summary", args=["profit"]))
        self.assertEqual(response.status_code, 400)

    def test_stock_movement_summary(self):
        response = self.client.get(reverse("ledger:summary", args=["stock_movements"]))
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["by_type"], {})
        self.assertEqual(Decimal(data["incoming"]), 0)

    def test_bad_bodies(self):
        response = self.client.post(reverse("ledger:record-movement"), "[1, 2]",
                                    content_type="application/json")
        self.assertEqual(response.status_code, 400)
        response = self.client.post(reverse("ledger:record-movement"), "{not json",
                                    content_type="application/json")
        self.assertEqual(response.status_code, 400)
        # POST only
        response = self.client.get(reverse("ledger:record-movement"))
        self.assertEqual(response.status_code, 405)

    def test_user_without_company_is_forbidden(self):
        stranger = get_user_model().objects.create_user(username="stranger", password="pw")
        self.client.force_login(stranger)
        response = self.post("record-movement", {
            "item_code": "ITM0001", "movement_type": "RECEIPT", "quantity": "1"})
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["error"]["kind"], "forbidden")

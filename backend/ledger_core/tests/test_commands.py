from datetime import timedelta
from decimal import Decimal
from io import StringIO
from unittest import mock

from django.core.management import CommandError, call_command
from django.test import TestCase
from django.utils import timezone

from ..models import Company, InventoryItem, Invoice
from ..services import create_invoice, send_invoice
from ..tasks import (mark_all_overdue_documents, mark_overdue_documents,
                     verify_all_ledgers, verify_company_ledgers)
from .base import TenantSetupMixin


class DemoTenantCommandTests(TestCase):
    def test_demo_tenant_balances(self):
        out = StringIO()
        call_command("create_demo_tenant", "--username", "demo", stdout=out)
        self.assertIn("demo-textiles is ready.", out.getvalue())

        company = Company.objects.get(slug="demo-textiles")
        item = InventoryItem.objects.get(company=company)
        self.assertEqual(item.item_code, "ITM0001")
        self.assertEqual(Invoice.objects.get(company=company).status, "SENT")

        out = StringIO()
        call_command("verify_ledgers", "--company", "demo-textiles", stdout=out)
        self.assertIn("demo-textiles: all ledgers balance", out.getvalue())

    def test_seed_twice_gets_a_fresh_slug(self):
        call_command("seed_demo", stdout=StringIO())
        call_command("seed_demo", stdout=StringIO())
        slugs = set(Company.objects.values_list("slug", flat=True))
        self.assertEqual(slugs, {"demo-textiles", "demo-textiles-1"})


class VerifyLedgersCommandTests(TenantSetupMixin, TestCase):
    def test_drift_fails_the_command(self):
        invoice = create_invoice(self.company, 100, customer=self.customer)
        Invoice.objects.filter(pk=invoice.pk).update(amount_paid=40, balance_due=60)
        out = StringIO()
        with self.assertRaises(CommandError):
            call_command("verify_ledgers", stdout=out)
        self.assertIn("Invoice INV0001 amount_paid", out.getvalue())

    def test_unknown_company(self):
        with self.assertRaises(CommandError):
            call_command("verify_ledgers", "--company", "nope", stdout=StringIO())


class TaskTests(TenantSetupMixin, TestCase):
    def test_verify_company_ledgers_task(self):
        self.assertEqual(verify_company_ledgers(self.company.pk), [])

        invoice = create_invoice(self.company, 100)
        Invoice.objects.filter(pk=invoice.pk).update(amount_paid=40, balance_due=60)
        problems = verify_company_ledgers(self.company.pk)
        self.assertEqual(Decimal(problems[0]["expected"]), 0)

    def test_verify_all_fans_out(self):
        with mock.patch.object(verify_company_ledgers, "delay") as delay:
            self.assertEqual(verify_all_ledgers(), 1)
        delay.assert_called_once_with(self.company.pk)

    def test_mark_overdue_task(self):
        invoice = create_invoice(self.company, 100, customer=self.customer,
                                 due_date=timezone.localdate() - timedelta(days=2))
        send_invoice(self.company, invoice.invoice_number)
        self.assertEqual(mark_overdue_documents(self.company.pk), 1)

    def test_overdue_sweep_fans_out(self):
        with mock.patch.object(mark_overdue_documents, "delay") as delay:
            self.assertEqual(mark_all_overdue_documents(), 1)
        delay.assert_called_once_with(self.company.pk)

from decimal import Decimal

from django.test import TestCase

from ..exceptions import (InsufficientBalanceError, InvalidInputError,
                          LimitExceededError, NotFoundError)
from ..models import PettyCashAccount, PettyCashTransaction
from ..services import (create_petty_cash_account,
                        create_petty_cash_transaction,
                        update_petty_cash_account, verify_ledgers)
from .base import TenantSetupMixin


class PettyCashTests(TenantSetupMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.account = create_petty_cash_account(
            self.company, "Factory float", user=self.user,
            initial_balance="1000", max_limit="5000", min_balance="200",
            location=self.factory, custodian_name="R. Kumar")

    def balance(self):
        self.account.refresh_from_db()
        return self.account.current_balance

    def test_account_defaults(self):
        self.assertEqual(self.account.account_code, "PCA001")
        self.assertEqual(self.account.currency, self.company.currency_code)
        self.assertDecimalEqual(self.account.current_balance, "1000")

    def test_disbursement_within_and_beyond_balance(self):
        txn, warning = create_petty_cash_transaction(
            self.company, "PCA001", "DISBURSEMENT", 300, user=self.user,
            description="Loading charges", recipient_name="Porter")
        self.assertIsNone(warning)
        self.assertEqual(txn.transaction_code, "PCT0001")
        self.assertDecimalEqual(txn.balance_before, "1000")
        self.assertDecimalEqual(txn.balance_after, "700")
        self.assertDecimalEqual(self.balance(), "700")

        with self.assertRaises(InsufficientBalanceError):
            create_petty_cash_transaction(self.company, "PCA001", "DISBURSEMENT", 800)
        self.assertDecimalEqual(self.balance(), "700")
        self.assertEqual(PettyCashTransaction.objects.count(), 1)

    def test_replenishment_respects_max_limit(self):
        with self.assertRaises(LimitExceededError):
            create_petty_cash_transaction(self.company, "PCA001", "REPLENISHMENT", "4000.01")
        create_petty_cash_transaction(self.company, "PCA001", "REPLENISHMENT", "4000")
        self.assertDecimalEqual(self.balance(), "5000")

    def test_falling_below_minimum_warns(self):
        with self.assertLogs("ledger_core.services.pettycash", level="WARNING"):
            _, warning = create_petty_cash_transaction(
                self.company, "PCA001", "DISBURSEMENT", 850)
        self.assertIn("below the minimum balance of 200", warning)
        # the transaction still went through
        self.assertDecimalEqual(self.balance(), "150")

    def test_adjustment_is_signed(self):
        txn, _ = create_petty_cash_transaction(self.company, "PCA001", "ADJUSTMENT", "-25.50")
        self.assertDecimalEqual(txn.amount, "25.50")
        self.assertDecimalEqual(txn.signed_effect, "-25.50")
        create_petty_cash_transaction(self.company, "PCA001", "ADJUSTMENT", "10")
        self.assertDecimalEqual(self.balance(), "984.50")

        with self.assertRaises(InvalidInputError):
            create_petty_cash_transaction(self.company, "PCA001", "ADJUSTMENT", 0)
        with self.assertRaises(InsufficientBalanceError):
            create_petty_cash_transaction(self.company, "PCA001", "ADJUSTMENT", "-2000")

    def test_ledger_balances(self):
        for kind, amount in (("DISBURSEMENT", "120"), ("REPLENISHMENT", "500"),
                             ("ADJUSTMENT", "-3"), ("DISBURSEMENT", "77.25")):
            create_petty_cash_transaction(self.company, "PCA001", kind, amount)
        self.assertDecimalEqual(self.balance(), "1299.75")
        self.assertEqual(verify_ledgers(self.company), [])

    def test_bad_type_and_unknown_account(self):
        with self.assertRaises(InvalidInputError):
            create_petty_cash_transaction(self.company, "PCA001", "WITHDRAWAL", 10)
        with self.assertRaises(InvalidInputError):
            create_petty_cash_transaction(self.company, "PCA001", "DISBURSEMENT", -10)
        with self.assertRaises(NotFoundError):
            create_petty_cash_transaction(self.company, "PCA999", "DISBURSEMENT", 10)
        self.assertDecimalEqual(self.balance(), "1000")

    def test_update_settings_and_deactivate(self):
        update_petty_cash_account(self.company, "PCA001", max_limit="8000", user=self.user)
        create_petty_cash_transaction(self.company, "PCA001", "REPLENISHMENT", "6000")
        self.assertDecimalEqual(self.balance(), "7000")

        update_petty_cash_account(self.company, "PCA001", is_active=False)
        with self.assertRaises(NotFoundError):
            create_petty_cash_transaction(self.company, "PCA001", "DISBURSEMENT", 10)
        # inactive accounts can still be reactivated
        account = update_petty_cash_account(self.company, "PCA001", is_active=True)
        self.assertTrue(account.is_active)

    def test_balances_cannot_be_edited_directly(self):
        with self.assertRaises(InvalidInputError):
            update_petty_cash_account(self.company, "PCA001", current_balance="99999")
        self.assertDecimalEqual(self.balance(), "1000")

    def test_initial_balance_above_limit(self):
        with self.assertRaises(InvalidInputError):
            create_petty_cash_account(self.company, "Too big", initial_balance=10, max_limit=5)
        self.assertEqual(PettyCashAccount.objects.count(), 1)

from decimal import Decimal
from threading import Lock, Thread

from django.db import close_old_connections, connection
from django.test import TransactionTestCase

from ..exceptions import LedgerError
from ..models import InventoryItem, PettyCashAccount, StockMovement
from ..services import (create_inventory_item, create_petty_cash_account,
                        create_petty_cash_transaction, record_stock_movement,
                        verify_ledgers)
from .base import make_tenant


class ConcurrentMovementTests(TransactionTestCase):
    """Row locks serialize writers on the same balance; none may overdraw it."""

    def setUp(self):
        if connection.vendor == "sqlite":
            self.skipTest("SQLite has no row locks; run on Postgres.")
        self.company, self.user, self.warehouse, _ = make_tenant()

    def hammer(self, fn, count=10):
        successes, failures = [], []
        lock = Lock()

        def worker(ix):
            close_old_connections()
            try:
                fn(ix)
                with lock:
                    successes.append(ix)
            except LedgerError as exc:
                with lock:
                    failures.append(exc.kind)
            finally:
                close_old_connections()

        threads = [Thread(target=worker, args=(i,)) for i in range(count)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        return successes, failures

    def test_concurrent_issues_never_go_negative(self):
        item = create_inventory_item(self.company, "Zari thread", opening_stock=80)
        # first movement creates the MOV sequence row outside the race
        record_stock_movement(self.company, item.item_code, "RECEIPT", 20)

        successes, failures = self.hammer(
            lambda ix: record_stock_movement(
                self.company, item.item_code, "ISSUE", Decimal("20"), reference=f"SO-{ix}"))

        item = InventoryItem.objects.get(pk=item.pk)
        self.assertEqual(len(successes), 5)
        self.assertEqual(failures, ["insufficient_stock"] * 5)
        self.assertEqual(item.current_stock, Decimal("0"))
        self.assertEqual(StockMovement.objects.filter(movement_type="ISSUE").count(), 5)
        self.assertEqual(verify_ledgers(self.company), [])

    def test_concurrent_disbursements(self):
        account = create_petty_cash_account(self.company, "Float", initial_balance=250)
        create_petty_cash_transaction(self.company, account.account_code, "DISBURSEMENT", 50)

        successes, failures = self.hammer(
            lambda ix: create_petty_cash_transaction(
                self.company, account.account_code, "DISBURSEMENT", 50))

        account = PettyCashAccount.objects.get(pk=account.pk)
        self.assertEqual(len(successes), 4)
        self.assertEqual(len(failures), 6)
        self.assertEqual(account.current_balance, Decimal("0"))
        self.assertEqual(verify_ledgers(self.company), [])

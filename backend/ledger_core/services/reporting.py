import logging
from decimal import Decimal

from django.db.models import Count, DecimalField, F, Q, Sum, Value
from django.db.models.functions import Coalesce

from ..exceptions import InvalidInputError
from ..models import (Bill, Expense, InventoryItem, Invoice, Payment,
                      PettyCashAccount, PettyCashTransaction, StockMovement)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
MONEY = DecimalField(max_digits=18, decimal_places=2)
QTY = DecimalField(max_digits=14, decimal_places=4)
VALUED_MOVEMENTS = ("RECEIPT", "ISSUE", "RETURN")


# ------------------------------------------------
# Read-only roll-ups. No locks: figures may trail
# a movement committing elsewhere.
# ------------------------------------------------
def _sum(expr, output_field=MONEY, **extra):
    # Sum() is NULL over no rows; report 0 instead
    return Coalesce(Sum(expr, **extra), Value(ZERO), output_field=output_field)


def _in_range(qs, field, from_date, to_date):
    if from_date:
        qs = qs.filter(**{f"{field}__gte": from_date})
    if to_date:
        qs = qs.filter(**{f"{field}__lte": to_date})
    return qs


def _grouped(qs, key, **aggregates):
    """{key value: {aggregate name: value}} for each distinct key value."""
    return {
        row.pop(key): row
        for row in qs.order_by().values(key).annotate(**aggregates).order_by(key)
    }


def expense_stats(company, from_date=None, to_date=None):
    qs = _in_range(Expense.objects.active(company), "expense_date", from_date, to_date)
    totals = qs.aggregate(total_amount=_sum("amount"), count=Count("id"))
    return {
        **totals,
        "by_status": _grouped(qs, "status", count=Count("id"), amount=_sum("amount")),
        "by_category": _grouped(qs, "category", count=Count("id"), amount=_sum("amount")),
    }


def petty_cash_summary(company, account_code=None):
    accounts = PettyCashAccount.objects.active(company)
    if account_code:
        accounts = accounts.filter(account_code=account_code)
    txns = PettyCashTransaction.objects.for_company(company).filter(account__in=accounts)

    balances = accounts.aggregate(
        account_count=Count("id"),
        total_balance=_sum("current_balance"),
        total_initial_balance=_sum("initial_balance"),
    )
    return {
        **balances,
        "by_type": _grouped(
            txns, "transaction_type",
            count=Count("id"),
            amount=_sum("amount"),
            # ADJUSTMENT amounts are unsigned, the net effect is not
            net_effect=_sum(F("balance_after") - F("balance_before")),
        ),
    }


def payment_summary(company, from_date=None, to_date=None):
    qs = _in_range(Payment.objects.for_company(company), "payment_date", from_date, to_date)
    completed = qs.filter(status="COMPLETED")
    return {
        "by_status": _grouped(qs, "status", count=Count("id"), amount=_sum("amount")),
        "by_reference_type": {
            "INVOICE": completed.filter(invoice__isnull=False).aggregate(
                count=Count("id"), amount=_sum("amount")),
            "BILL": completed.filter(bill__isnull=False).aggregate(
                count=Count("id"), amount=_sum("amount")),
        },
    }


def stock_movement_summary(company, from_date=None, to_date=None):
    qs = _in_range(StockMovement.objects.for_company(company),
                   "created_at__date", from_date, to_date)
    flows = qs.annotate(effect=F("new_stock") - F("previous_stock")).aggregate(
        incoming=_sum("effect", QTY, filter=Q(effect__gt=0)),
        outgoing=_sum("effect", QTY, filter=Q(effect__lt=0)),
    )
    incoming, outgoing = flows["incoming"], -flows["outgoing"]
    return {
        "by_type": _grouped(
            qs, "movement_type",
            count=Count("id"),
            total_quantity=_sum("quantity", QTY),
            # ADJUSTMENT quantity is a counted level and TRANSFER moves no
            # goods in or out, neither has a movement value. Rows without a
            # unit cost carry none either.
            total_value=_sum(
                F("quantity") * F("unit_cost"), MONEY,
                filter=Q(movement_type__in=VALUED_MOVEMENTS),
            ),
        ),
        "incoming": incoming,
        "outgoing": outgoing,
        "net": incoming - outgoing,
    }


def document_summary(company, kind):
    """Receivables (``invoice``) or payables (``bill``) by status."""
    models_by_kind = {"invoice": Invoice, "bill": Bill}
    if kind not in models_by_kind:
        raise InvalidInputError(f"Unknown document kind {kind!r}.", field="kind", value=kind)
    qs = models_by_kind[kind].objects.active(company)
    amounts = dict(
        count=Count("id"),
        total=_sum("total_amount"),
        paid=_sum("amount_paid"),
        outstanding=_sum("balance_due"),
    )
    return {
        **qs.aggregate(**amounts),
        "by_status": _grouped(qs, "status", **amounts),
    }


# ------------------------------------------------
# Ledger verification (diagnostic, never corrects)
# ------------------------------------------------
def verify_ledgers(company):
    """
    Recompute every cached balance of ``company`` from its movements.

    Returns one dict per discrepancy; an empty list means every ledger
    balances. Soft-deleted entities are checked too.
    """
    problems = []

    def report(entity, code, field, cached, expected):
        problems.append({
            "entity": entity, "code": code, "field": field,
            "cached": cached, "expected": expected,
        })
        logger.warning(
            "Ledger drift in company %s: %s %s.%s is %s, movements say %s",
            company.pk, entity, code, field, cached, expected,
        )

    items = InventoryItem.objects.for_company(company).annotate(
        effect=_sum(F("movements__new_stock") - F("movements__previous_stock"), QTY)
    )
    for item in items:
        expected = item.opening_stock + item.effect
        if item.current_stock != expected:
            report("InventoryItem", item.item_code, "current_stock",
                   item.current_stock, expected)

    for model in (Invoice, Bill):
        docs = model.objects.for_company(company).annotate(
            paid=_sum("payments__amount", filter=Q(payments__status="COMPLETED"))
        )
        for doc in docs:
            if doc.amount_paid != doc.paid:
                report(model.__name__, doc.number, "amount_paid", doc.amount_paid, doc.paid)
            if doc.balance_due != doc.total_amount - doc.amount_paid:
                report(model.__name__, doc.number, "balance_due",
                       doc.balance_due, doc.total_amount - doc.amount_paid)

    accounts = PettyCashAccount.objects.for_company(company).annotate(
        effect=_sum(F("transactions__balance_after") - F("transactions__balance_before"))
    )
    for account in accounts:
        expected = account.initial_balance + account.effect
        if account.current_balance != expected:
            report("PettyCashAccount", account.account_code, "current_balance",
                   account.current_balance, expected)

    return problems

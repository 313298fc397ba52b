"""
Named ledger operations.

Each takes the tenant id, a plain dict payload and the acting user's id,
and returns a plain dict (Decimals and dates rendered as strings) or
raises a LedgerError. Views, admin and Celery all call through here, so
the calling convention is the same whatever the transport.
"""
import datetime
from decimal import Decimal

from . import services
from .exceptions import InvalidInputError, NotFoundError
from .forms import (CancelPaymentForm, ExpenseStatusForm, PaymentForm,
                    PettyCashTransactionForm, StockMovementForm, SummaryForm,
                    clean_payload)
from .models import Company, EntityMembership


# ---------- Context ----------
def _company(company_id):
    try:
        return Company.objects.get(pk=company_id, is_active=True)
    except (Company.DoesNotExist, ValueError, TypeError):
        raise NotFoundError("Company not found or inactive.", company_id=company_id)


def _actor(company, user_id):
    """The acting user must hold an active membership in the company."""
    if user_id is None:
        return None
    membership = (EntityMembership.objects.active(company)
                  .filter(user_id=user_id).select_related("user").first())
    if membership is None:
        raise InvalidInputError(
            "User is not an active member of this company.",
            field="user_id", value=user_id)
    return membership.user


def _plain(value):
    # JSON-safe copy of a service result
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    if isinstance(value, (Decimal, datetime.date)):
        return str(value)
    return value


def _optional(cleaned, *fields):
    # Drop empty optional form values so service defaults apply
    return {field: cleaned[field] for field in fields if cleaned.get(field) not in (None, "")}


# ---------- Serializers ----------
def movement_dict(movement):
    item = movement.item
    return _plain({
        "movement_code": movement.movement_code,
        "item_code": item.item_code,
        "movement_type": movement.movement_type,
        "quantity": movement.quantity,
        "previous_stock": movement.previous_stock,
        "new_stock": movement.new_stock,
        "from_location": movement.from_location_id,
        "to_location": movement.to_location_id,
        "unit_cost": movement.unit_cost,
        "reference": movement.reference,
        "created_at": movement.created_at.isoformat(),
    })


def item_dict(item):
    return _plain({
        "item_code": item.item_code,
        "name": item.name,
        "current_stock": item.current_stock,
        "location": item.location_id,
        "below_reorder_level": item.is_below_reorder_level,
    })


def document_dict(doc):
    return _plain({
        "reference_type": doc.REFERENCE_TYPE,
        "number": doc.number,
        "status": doc.status,
        "total_amount": doc.total_amount,
        "amount_paid": doc.amount_paid,
        "balance_due": doc.balance_due,
        "currency": doc.currency,
        "last_payment_date": doc.last_payment_date,
        "last_payment_method": doc.last_payment_method,
        "last_payment_ref": doc.last_payment_ref,
    })


def payment_dict(payment):
    return _plain({
        "payment_code": payment.payment_code,
        "reference_type": payment.reference_type,
        "document_number": payment.document.number,
        "amount": payment.amount,
        "currency": payment.currency,
        "payment_date": payment.payment_date,
        "payment_method": payment.payment_method,
        "party_type": payment.party_type,
        "party_name": payment.party_name,
        "status": payment.status,
        "balance_due_before": payment.balance_due_before,
        "balance_due_after": payment.balance_due_after,
    })


def petty_cash_transaction_dict(txn):
    return _plain({
        "transaction_code": txn.transaction_code,
        "account_code": txn.account.account_code,
        "transaction_type": txn.transaction_type,
        "amount": txn.amount,
        "balance_before": txn.balance_before,
        "balance_after": txn.balance_after,
        "transaction_date": txn.transaction_date,
    })


def expense_dict(expense):
    return _plain({
        "expense_code": expense.expense_code,
        "title": expense.title,
        "category": expense.category,
        "amount": expense.amount,
        "status": expense.status,
        "approved_by": expense.approved_by_id,
        "approved_at": expense.approved_at.isoformat() if expense.approved_at else None,
        "rejected_reason": expense.rejected_reason,
        "payment_date": expense.payment_date,
    })


# ---------- Operations ----------
def record_movement(company_id, payload, user_id=None):
    company = _company(company_id)
    user = _actor(company, user_id)
    data = clean_payload(StockMovementForm, payload)
    movement = services.record_stock_movement(
        company, data["item_code"], data["movement_type"], data["quantity"],
        user=user,
        **_optional(data, "to_location", "unit_cost", "reference", "notes"),
    )
    return {"movement": movement_dict(movement), "item": item_dict(movement.item)}


def record_payment(company_id, payload, user_id=None):
    company = _company(company_id)
    user = _actor(company, user_id)
    data = clean_payload(PaymentForm, payload)
    recorder = (services.record_invoice_payment if data["reference_type"] == "INVOICE"
                else services.record_bill_payment)
    payment, doc = recorder(
        company, data["document_number"], data["amount"],
        user=user,
        payment_method=data["payment_method"] or "CASH",
        **_optional(data, "payment_date", "currency", "transaction_ref", "bank_name",
                    "cheque_number", "cheque_date", "upi_id", "receipt_url", "notes"),
    )
    return {"payment": payment_dict(payment), "document": document_dict(doc)}


def cancel_payment(company_id, payload, user_id=None):
    company = _company(company_id)
    user = _actor(company, user_id)
    data = clean_payload(CancelPaymentForm, payload)
    payment, doc = services.cancel_payment(
        company, data["payment_code"], user=user, reason=data["reason"])
    return {"payment": payment_dict(payment), "document": document_dict(doc)}


def create_petty_cash_transaction(company_id, payload, user_id=None):
    company = _company(company_id)
    user = _actor(company, user_id)
    data = clean_payload(PettyCashTransactionForm, payload)
    txn, warning = services.create_petty_cash_transaction(
        company, data["account_code"], data["transaction_type"], data["amount"],
        user=user,
        **_optional(data, "transaction_date", "description", "category",
                    "recipient_name", "receipt_number", "receipt_url",
                    "approved_by", "notes"),
    )
    return {
        "transaction": petty_cash_transaction_dict(txn),
        "account": _plain({
            "account_code": txn.account.account_code,
            "current_balance": txn.account.current_balance,
        }),
        "warning": warning,
    }


def update_expense_status(company_id, payload, user_id=None):
    company = _company(company_id)
    user = _actor(company, user_id)
    data = clean_payload(ExpenseStatusForm, payload)
    expense = services.change_expense_status(
        company, data["expense_code"], data["status"],
        user=user,
        reason=data["reason"],
        **_optional(data, "payment_method", "payment_date"),
    )
    return {"expense": expense_dict(expense)}


def summarize(company_id, payload, user_id=None):
    company = _company(company_id)
    _actor(company, user_id)
    data = clean_payload(SummaryForm, payload)
    report = data["report"]
    dates = {"from_date": data["from_date"], "to_date": data["to_date"]}

    if report == "expenses":
        result = services.expense_stats(company, **dates)
    elif report == "petty_cash":
        result = services.petty_cash_summary(company, data["account_code"] or None)
    elif report == "payments":
        result = services.payment_summary(company, **dates)
    elif report == "stock_movements":
        result = services.stock_movement_summary(company, **dates)
    elif report == "receivables":
        result = services.document_summary(company, "invoice")
    elif report == "payables":
        result = services.document_summary(company, "bill")
    else:
        result = services.verify_ledgers(company)
    return {"report": report, "data": _plain(result)}

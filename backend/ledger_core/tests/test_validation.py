from decimal import Decimal
from types import SimpleNamespace

import pytest

from ..exceptions import (ExceedsBalanceError, IllegalTransitionError,
                          InsufficientBalanceError, InsufficientStockError,
                          InvalidInputError, LimitExceededError)
from ..services.validation import (check_document_transition,
                                   check_expense_transition, check_payable,
                                   derive_status, next_petty_cash_balance,
                                   next_stock_level, require_positive)

D = Decimal


# ---------- amounts ----------
@pytest.mark.parametrize("value", [0, "0", -1, "-0.01"])
def test_require_positive_rejects_zero_and_negative(value):
    with pytest.raises(InvalidInputError) as exc:
        require_positive(value, "quantity")
    assert exc.value.detail["field"] == "quantity"


@pytest.mark.parametrize("value", [None, "abc", True, "NaN", "Infinity"])
def test_require_positive_rejects_non_numbers(value):
    with pytest.raises(InvalidInputError):
        require_positive(value)


def test_require_positive_returns_decimal():
    assert require_positive("12.50") == D("12.50")
    assert require_positive(3) == D("3")


# ---------- stock ----------
def test_receipt_and_return_add():
    assert next_stock_level("RECEIPT", D("100"), D("50")) == D("150")
    assert next_stock_level("RETURN", D("100"), "5") == D("105")


def test_issue_subtracts_and_refuses_negative():
    assert next_stock_level("ISSUE", D("150"), D("150")) == D("0")
    with pytest.raises(InsufficientStockError) as exc:
        next_stock_level("ISSUE", D("150"), D("200"))
    # insufficient stock is a kind of insufficient balance
    assert isinstance(exc.value, InsufficientBalanceError)
    assert exc.value.as_dict()["available"] == "150"


def test_adjustment_sets_absolute_level():
    # counted 80: result is 80, not 150 - 80 or 150 + 80
    assert next_stock_level("ADJUSTMENT", D("150"), D("80")) == D("80")


def test_transfer_keeps_quantity():
    assert next_stock_level("TRANSFER", D("42"), D("10")) == D("42")


def test_unknown_movement_type():
    with pytest.raises(InvalidInputError):
        next_stock_level("SCRAP", D("1"), D("1"))


# ---------- petty cash ----------
def test_replenishment_respects_max_limit():
    assert next_petty_cash_balance(
        "REPLENISHMENT", D("1000"), D("4000"), max_limit=D("5000")) == (D("5000"), None)
    with pytest.raises(LimitExceededError):
        next_petty_cash_balance("REPLENISHMENT", D("1000"), D("4000.01"), max_limit=D("5000"))


def test_disbursement_cannot_overdraw():
    assert next_petty_cash_balance("DISBURSEMENT", D("1000"), D("300"))[0] == D("700")
    with pytest.raises(InsufficientBalanceError):
        next_petty_cash_balance("DISBURSEMENT", D("700"), D("800"))


def test_adjustment_is_signed_delta():
    assert next_petty_cash_balance("ADJUSTMENT", D("700"), D("-50"))[0] == D("650")
    assert next_petty_cash_balance("ADJUSTMENT", D("700"), D("25"))[0] == D("725")
    with pytest.raises(InsufficientBalanceError):
        next_petty_cash_balance("ADJUSTMENT", D("700"), D("-701"))
    with pytest.raises(InvalidInputError):
        next_petty_cash_balance("ADJUSTMENT", D("700"), D("0"))


def test_negative_amount_only_allowed_for_adjustment():
    with pytest.raises(InvalidInputError):
        next_petty_cash_balance("DISBURSEMENT", D("700"), D("-50"))


def test_below_min_balance_is_a_warning_not_an_error():
    new, warning = next_petty_cash_balance(
        "DISBURSEMENT", D("1000"), D("900"), min_balance=D("200"))
    assert new == D("100")
    assert "below the minimum" in warning


# ---------- invoices / bills ----------
def _doc(status="SENT", balance_due="1000", number="INV0001"):
    return SimpleNamespace(status=status, balance_due=D(balance_due), number=number)


def test_check_payable():
    assert check_payable(_doc(), "400") == D("400")
    with pytest.raises(ExceedsBalanceError):
        check_payable(_doc(balance_due="400"), "400.01")
    for status in ("PAID", "CANCELLED"):
        with pytest.raises(IllegalTransitionError) as exc:
            check_payable(_doc(status=status), "1")
        assert exc.value.current == status


@pytest.mark.parametrize(
    "paid, current, expected",
    [
        ("600", "SENT", "PARTIALLY_PAID"),
        ("1000", "PARTIALLY_PAID", "PAID"),
        ("0", "PARTIALLY_PAID", "SENT"),
        ("0", "PAID", "SENT"),
        ("0", "DRAFT", "DRAFT"),
        ("0", "OVERDUE", "OVERDUE"),
        ("600", "DRAFT", "PARTIALLY_PAID"),
        ("0", "CANCELLED", "CANCELLED"),
    ],
)
def test_derive_status_for_invoice(paid, current, expected):
    assert derive_status(D("1000"), D(paid), current, open_status="SENT") == expected


def test_derive_status_bill_falls_back_to_received():
    assert derive_status(D("500"), D("0"), "PAID", open_status="RECEIVED") == "RECEIVED"


def test_document_transitions():
    check_document_transition("invoice", "DRAFT", "SENT")
    check_document_transition("bill", "DRAFT", "RECEIVED")
    check_document_transition("bill", "RECEIVED", "OVERDUE")
    check_document_transition("invoice", "OVERDUE", "CANCELLED")
    with pytest.raises(IllegalTransitionError):
        check_document_transition("invoice", "DRAFT", "RECEIVED")
    with pytest.raises(IllegalTransitionError):
        check_document_transition("invoice", "PARTIALLY_PAID", "CANCELLED")
    with pytest.raises(IllegalTransitionError):
        check_document_transition("bill", "CANCELLED", "RECEIVED")
    with pytest.raises(InvalidInputError):
        check_document_transition("receipt", "DRAFT", "SENT")


# ---------- expenses ----------
@pytest.mark.parametrize(
    "current, target",
    [
        ("PENDING", "APPROVED"),
        ("PENDING", "REJECTED"),
        ("PENDING", "CANCELLED"),
        ("APPROVED", "PAID"),
        ("APPROVED", "CANCELLED"),
        ("REJECTED", "PENDING"),
    ],
)
def test_allowed_expense_transitions(current, target):
    check_expense_transition(current, target)


@pytest.mark.parametrize(
    "current, target",
    [
        ("PENDING", "PAID"),
        ("REJECTED", "APPROVED"),
        ("PAID", "CANCELLED"),
        ("CANCELLED", "PENDING"),
        ("APPROVED", "PENDING"),
    ],
)
def test_illegal_expense_transitions(current, target):
    with pytest.raises(IllegalTransitionError) as exc:
        check_expense_transition(current, target)
    assert exc.value.as_dict() == {
        "kind": "illegal_transition",
        "message": f"Cannot move expense from {current} to {target}.",
        "current": current,
        "attempted": target,
    }


def test_unknown_expense_status():
    with pytest.raises(InvalidInputError):
        check_expense_transition("PENDING", "ARCHIVED")

from decimal import Decimal, InvalidOperation

from ..exceptions import (ExceedsBalanceError, IllegalTransitionError,
                          InsufficientBalanceError, InsufficientStockError,
                          InvalidInputError, LimitExceededError)

ZERO = Decimal("0")

STOCK_IN_TYPES = ("RECEIPT", "RETURN")
STOCK_MOVEMENT_TYPES = ("RECEIPT", "ISSUE", "TRANSFER", "ADJUSTMENT", "RETURN")
PETTY_CASH_TYPES = ("REPLENISHMENT", "DISBURSEMENT", "ADJUSTMENT")

# Expense workflow: current status -> statuses it may move to
EXPENSE_TRANSITIONS = {
    "PENDING": {"APPROVED", "REJECTED", "CANCELLED"},
    "APPROVED": {"PAID", "CANCELLED"},
    "REJECTED": {"PENDING"},   # resubmitted after correction
    "PAID": set(),             # terminal
    "CANCELLED": set(),        # terminal
}

# Status an issued-but-unpaid document sits in
DOCUMENT_OPEN_STATUS = {"invoice": "SENT", "bill": "RECEIVED"}


# ------------------------------------
# Input coercion
# ------------------------------------
def to_decimal(value, field="amount") -> Decimal:
    # bool is an int subclass, True would silently become 1
    if value is None or isinstance(value, bool):
        raise InvalidInputError(f"{field} is required.", field=field, value=value)
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidInputError(f"{field} must be a number.", field=field, value=value)
    if not number.is_finite():
        raise InvalidInputError(f"{field} must be a finite number.", field=field, value=value)
    return number


def require_positive(amount, field="amount") -> Decimal:
    """Direction is carried by the movement kind, never by the sign."""
    amount = to_decimal(amount, field)
    if amount <= ZERO:
        raise InvalidInputError(
            f"{field} must be greater than zero.", field=field, value=amount)
    return amount


# ------------------------------------
# Stock
# ------------------------------------
def next_stock_level(movement_type, current, quantity) -> Decimal:
    """
    Stock level after applying one movement.

    RECEIPT / RETURN add, ISSUE subtracts, ADJUSTMENT sets the counted
    level (absolute, not a delta) and TRANSFER leaves the quantity alone.
    """
    quantity = require_positive(quantity, "quantity")

    if movement_type in STOCK_IN_TYPES:
        new = current + quantity
    elif movement_type == "ISSUE":
        new = current - quantity
    elif movement_type == "ADJUSTMENT":
        new = quantity
    elif movement_type == "TRANSFER":
        new = current
    else:
        raise InvalidInputError(
            f"Unknown movement type {movement_type!r}.",
            field="movement_type", value=movement_type)

    if new < ZERO:
        raise InsufficientStockError(
            f"Insufficient stock: {current} available, {quantity} requested.",
            field="quantity", available=current, requested=quantity)
    return new


# ------------------------------------
# Petty cash
# ------------------------------------
def next_petty_cash_balance(transaction_type, current, amount, *,
                            max_limit=None, min_balance=None):
    """
    Returns ``(new_balance, warning)``.

    ADJUSTMENT is a signed delta: ``amount`` may be negative for this
    kind only. Dropping under ``min_balance`` is allowed and reported
    through ``warning`` instead of an exception.
    """
    if transaction_type not in PETTY_CASH_TYPES:
        raise InvalidInputError(
            f"Unknown petty cash transaction type {transaction_type!r}.",
            field="transaction_type", value=transaction_type)

    if transaction_type == "ADJUSTMENT":
        amount = to_decimal(amount)
        if amount == ZERO:
            raise InvalidInputError(
                "Adjustment amount cannot be zero.", field="amount", value=amount)
    else:
        amount = require_positive(amount)

    if transaction_type == "REPLENISHMENT":
        new = current + amount
        if max_limit is not None and new > max_limit:
            raise LimitExceededError(
                f"Replenishment would take the balance to {new}, "
                f"above the limit of {max_limit}.",
                field="amount", balance=current, max_limit=max_limit)
    elif transaction_type == "DISBURSEMENT":
        new = current - amount
    else:
        new = current + amount

    if new < ZERO:
        raise InsufficientBalanceError(
            f"Insufficient petty cash: balance {current}, requested {abs(amount)}.",
            field="amount", available=current, requested=abs(amount))

    warning = None
    if min_balance is not None and new < min_balance:
        warning = f"Balance {new} is below the minimum balance of {min_balance}."
    return new, warning


# ------------------------------------
# Invoices / bills
# ------------------------------------
def check_payable(document, amount) -> Decimal:
    amount = require_positive(amount)
    if document.status in ("PAID", "CANCELLED"):
        raise IllegalTransitionError(
            f"Cannot record a payment against {document.status.lower()} {document.number}.",
            current=document.status, attempted="PAYMENT", document=document.number)
    if amount > document.balance_due:
        raise ExceedsBalanceError(
            f"Payment of {amount} exceeds the balance due of {document.balance_due}.",
            field="amount", value=amount, balance_due=document.balance_due)
    return amount


def derive_status(total, amount_paid, current_status, *, open_status):
    """
    Document status implied by how much has been paid.

    Shared by payment recording and payment cancellation so both paths
    agree. CANCELLED never changes; a document paid back down to zero falls
    back to ``open_status`` (SENT / RECEIVED); DRAFT and OVERDUE with
    nothing paid stay as they are.
    """
    if current_status == "CANCELLED":
        return current_status
    if amount_paid >= total:
        return "PAID"
    if amount_paid > ZERO:
        return "PARTIALLY_PAID"
    if current_status in ("PARTIALLY_PAID", "PAID"):
        return open_status
    return current_status


def check_document_transition(kind, current, target):
    """Manual moves only; payment-driven statuses go through derive_status."""
    if kind not in DOCUMENT_OPEN_STATUS:
        raise InvalidInputError(f"Unknown document kind {kind!r}.", field="kind", value=kind)
    open_status = DOCUMENT_OPEN_STATUS[kind]
    allowed = {
        "DRAFT": {open_status, "CANCELLED"},
        open_status: {"OVERDUE", "CANCELLED"},
        "OVERDUE": {"CANCELLED"},
    }
    if target not in allowed.get(current, set()):
        raise IllegalTransitionError(
            f"Cannot move {kind} from {current} to {target}.",
            current=current, attempted=target)


# ------------------------------------
# Expenses
# ------------------------------------
def check_expense_transition(current, target):
    if target not in EXPENSE_TRANSITIONS:
        raise InvalidInputError(
            f"Unknown expense status {target!r}.", field="status", value=target)
    if target not in EXPENSE_TRANSITIONS.get(current, set()):
        raise IllegalTransitionError(
            f"Cannot move expense from {current} to {target}.",
            current=current, attempted=target)

import logging

from django.utils import timezone

from ..exceptions import IllegalTransitionError, InvalidInputError
from ..models import Expense, Location
from ..models.expense import EXPENSE_CATEGORY_CHOICES
from .audit_helper import log_action
from .codes import next_code
from .coordinator import atomic_unit, lock_active, resolve_active
from .validation import check_expense_transition, require_positive

logger = logging.getLogger(__name__)

EXPENSE_CATEGORIES = {value for value, _ in EXPENSE_CATEGORY_CHOICES}
EXPENSE_EDITABLE_FIELDS = {
    "title", "description", "category", "amount", "expense_date", "location",
    "employee_name", "receipt_url", "notes", "payment_method",
}


def _check_category(category):
    if category not in EXPENSE_CATEGORIES:
        raise InvalidInputError(
            f"Unknown expense category {category!r}.", field="category", value=category)


# ----------------------------
# Expense lifecycle
# ----------------------------
@atomic_unit
def create_expense(company, title, category, amount, *, user=None,
                   expense_date=None, location=None, **metadata):
    _check_category(category)
    amount = require_positive(amount)
    unknown = set(metadata) - EXPENSE_EDITABLE_FIELDS
    if unknown:
        raise InvalidInputError(
            f"Unexpected expense fields: {', '.join(sorted(unknown))}.",
            field=sorted(unknown)[0])

    expense = Expense.objects.create(
        company=company,
        expense_code=next_code(company, "EXP"),
        title=title,
        category=category,
        amount=amount,
        currency=company.currency_code,
        expense_date=expense_date or timezone.localdate(),
        location=resolve_active(Location, company, location, "location"),
        **{key: value for key, value in metadata.items() if value is not None},
    )
    log_action(action="create", instance=expense, user=user,
               changes={"amount": amount, "category": category})
    return expense


@atomic_unit
def update_expense(company, expense_code, *, user=None, **changes):
    """Edit details while the expense is still open (not PAID / CANCELLED)."""
    if "status" in changes:
        raise InvalidInputError(
            "Status changes go through change_expense_status.", field="status")
    unknown = set(changes) - EXPENSE_EDITABLE_FIELDS
    if unknown:
        raise InvalidInputError(
            f"Cannot update {', '.join(sorted(unknown))} on an expense.",
            field=sorted(unknown)[0])

    expense = lock_active(Expense, company, expense_code=expense_code)
    if expense.status in ("PAID", "CANCELLED"):
        raise IllegalTransitionError(
            f"Expense {expense_code} is {expense.status.lower()} and can no longer be edited.",
            current=expense.status, attempted="UPDATE")

    if "amount" in changes:
        changes["amount"] = require_positive(changes["amount"])
    if "category" in changes:
        _check_category(changes["category"])
    if "location" in changes:
        changes["location"] = resolve_active(Location, company, changes["location"], "location")

    for field, value in changes.items():
        setattr(expense, field, value)
    expense.save()
    log_action(action="update", instance=expense, user=user,
               changes={key: str(value) for key, value in changes.items()})
    return expense


@atomic_unit
def change_expense_status(company, expense_code, status, *, user=None, reason="",
                          payment_method=None, payment_date=None):
    expense = lock_active(Expense, company, expense_code=expense_code)
    previous = expense.status
    check_expense_transition(previous, status)

    expense.status = status
    if status == "APPROVED":
        expense.approved_by = user
        expense.approved_at = timezone.now()
    elif status == "REJECTED":
        expense.rejected_reason = reason
    elif status == "PAID":
        expense.payment_date = payment_date or timezone.localdate()
        if payment_method:
            expense.payment_method = payment_method
    elif status == "CANCELLED" and reason:
        expense.notes = f"{expense.notes}\nCancelled: {reason}".strip()
    expense.save()

    log_action(action="status_change", instance=expense, user=user,
               changes={"from": previous, "to": status, "reason": reason})
    logger.info("%s moved %s -> %s", expense_code, previous, status)
    return expense


@atomic_unit
def delete_expense(company, expense_code, *, user=None):
    """Soft delete, allowed only while the expense is PENDING."""
    expense = lock_active(Expense, company, expense_code=expense_code)
    if expense.status != "PENDING":
        raise IllegalTransitionError(
            f"Only pending expenses can be deleted; {expense_code} is {expense.status}.",
            current=expense.status, attempted="DELETE")
    expense.is_active = False
    expense.save(update_fields=["is_active", "updated_at"])
    log_action(action="delete", instance=expense, user=user)
    return expense

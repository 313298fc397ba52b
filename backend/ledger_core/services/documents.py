import logging
from datetime import timedelta

from django.utils import timezone

from ..exceptions import IllegalTransitionError, InvalidInputError
from ..models import Bill, Customer, Invoice, Supplier
from .audit_helper import log_action
from .codes import next_code
from .coordinator import atomic_unit, lock_active, resolve_active
from .validation import check_document_transition, to_decimal

logger = logging.getLogger(__name__)


# ----------------------------------------------
# Creation
# ----------------------------------------------
def _create_document(model, company, *, party_field, party, total_amount, doc_date,
                     date_field, due_date, currency, notes, user, extra=None):
    total = to_decimal(total_amount, "total_amount")
    if total <= 0:
        raise InvalidInputError(
            "total_amount must be greater than zero.", field="total_amount", value=total)
    doc_date = doc_date or timezone.localdate()
    # Default due date from the party's credit terms
    if due_date is None and party is not None:
        due_date = doc_date + timedelta(days=party.payment_terms_days)

    prefix = "INV" if model is Invoice else "BILL"
    doc = model.objects.create(
        company=company,
        **{model.NUMBER_FIELD: next_code(company, prefix)},
        **{party_field: party, date_field: doc_date},
        due_date=due_date,
        currency=currency or company.currency_code,
        total_amount=total,
        amount_paid=0,
        balance_due=total,
        notes=notes,
        **(extra or {}),
    )
    log_action(action="create", instance=doc, user=user,
               changes={"total_amount": total})
    logger.info("Created %s for %s (total %s)", doc.number, party, total)
    return doc


@atomic_unit
def create_invoice(company, total_amount, *, customer=None, invoice_date=None,
                   due_date=None, currency=None, notes="", user=None):
    customer = resolve_active(Customer, company, customer, "customer")
    return _create_document(
        Invoice, company, party_field="customer", party=customer,
        total_amount=total_amount, doc_date=invoice_date, date_field="invoice_date",
        due_date=due_date, currency=currency, notes=notes, user=user)


@atomic_unit
def create_bill(company, total_amount, *, supplier=None, bill_date=None,
                due_date=None, supplier_reference="", currency=None, notes="",
                user=None):
    supplier = resolve_active(Supplier, company, supplier, "supplier")
    return _create_document(
        Bill, company, party_field="supplier", party=supplier,
        total_amount=total_amount, doc_date=bill_date, date_field="bill_date",
        due_date=due_date, currency=currency, notes=notes, user=user,
        extra={"supplier_reference": supplier_reference})


# ----------------------------------------------
# Manual status moves
# ----------------------------------------------
def _transition(model, kind, company, number, target, user):
    doc = lock_active(model, company, **{model.NUMBER_FIELD: number})
    check_document_transition(kind, doc.status, target)
    # Cancelling voids the document, so nothing may have been paid on it
    if target == "CANCELLED" and doc.amount_paid > 0:
        raise IllegalTransitionError(
            f"Cannot cancel {doc.number}: {doc.amount_paid} has been paid; "
            "cancel the payments first.",
            current=doc.status, attempted=target)
    previous = doc.status
    doc.status = target
    doc.save(update_fields=["status", "updated_at"])
    log_action(action="status_change", instance=doc, user=user,
               changes={"from": previous, "to": target})
    logger.info("%s moved %s -> %s", doc.number, previous, target)
    return doc


@atomic_unit
def send_invoice(company, invoice_number, *, user=None):
    return _transition(Invoice, "invoice", company, invoice_number, "SENT", user)


@atomic_unit
def cancel_invoice(company, invoice_number, *, user=None):
    return _transition(Invoice, "invoice", company, invoice_number, "CANCELLED", user)


@atomic_unit
def receive_bill(company, bill_number, *, user=None):
    return _transition(Bill, "bill", company, bill_number, "RECEIVED", user)


@atomic_unit
def cancel_bill(company, bill_number, *, user=None):
    return _transition(Bill, "bill", company, bill_number, "CANCELLED", user)


@atomic_unit
def mark_overdue(company, *, today=None):
    """
    Move issued documents past their due date with nothing paid to OVERDUE.
    Returns the number of documents moved.
    """
    today = today or timezone.localdate()
    moved = 0
    for model, kind in ((Invoice, "invoice"), (Bill, "bill")):
        due = (model.objects.active(company)
               .select_for_update()
               .filter(status=model.OPEN_STATUS, due_date__lt=today, balance_due__gt=0))
        for doc in due:
            check_document_transition(kind, doc.status, "OVERDUE")
            doc.status = "OVERDUE"
            doc.save(update_fields=["status", "updated_at"])
            log_action(action="status_change", instance=doc,
                       changes={"from": model.OPEN_STATUS, "to": "OVERDUE"})
            moved += 1
    if moved:
        logger.info("Marked %s documents overdue for company %s", moved, company.pk)
    return moved

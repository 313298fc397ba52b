import logging
from decimal import Decimal

from django.utils import timezone

from ..exceptions import IllegalTransitionError, InvalidInputError
from ..models import Bill, Invoice, Payment
from ..models.payment import PAYMENT_METHOD_CHOICES
from .audit_helper import log_action
from .codes import next_code
from .coordinator import atomic_unit, lock_active
from .validation import check_payable, derive_status

logger = logging.getLogger(__name__)

PAYMENT_METHODS = {value for value, _ in PAYMENT_METHOD_CHOICES}
# Optional keyword arguments copied onto the Payment row
PAYMENT_METADATA_FIELDS = {
    "currency", "transaction_ref", "bank_name", "cheque_number",
    "cheque_date", "upi_id", "notes", "receipt_url",
}


# ----------------------------
# Payment-related workflows
# ----------------------------
DOCUMENT_PAYMENT_FIELDS = [
    "amount_paid", "balance_due", "status",
    "last_payment_date", "last_payment_method", "last_payment_ref", "updated_at",
]


def _stamp_last_payment(doc, payment):
    doc.last_payment_date = payment.payment_date if payment else None
    doc.last_payment_method = payment.payment_method if payment else ""
    doc.last_payment_ref = payment.transaction_ref if payment else ""


def _apply_payment(document_model, company, number, amount, *, user,
                   payment_date, payment_method, metadata):
    """
    Touches exactly two aggregates: inserts the Payment, then updates the
    document's amount_paid / balance_due / status. Caller owns the
    transaction.
    """
    if payment_method not in PAYMENT_METHODS:
        raise InvalidInputError(
            f"Unknown payment method {payment_method!r}.",
            field="payment_method", value=payment_method)
    unknown = set(metadata) - PAYMENT_METADATA_FIELDS
    if unknown:
        raise InvalidInputError(
            f"Unexpected payment fields: {', '.join(sorted(unknown))}.",
            field=sorted(unknown)[0])

    # Lock the document row until the transaction finishes
    doc = lock_active(document_model, company, **{document_model.NUMBER_FIELD: number})
    amount = check_payable(doc, amount)

    before = doc.balance_due
    doc.amount_paid += amount
    doc.balance_due = doc.total_amount - doc.amount_paid
    doc.status = derive_status(
        doc.total_amount, doc.amount_paid, doc.status, open_status=doc.OPEN_STATUS)

    currency = metadata.pop("currency", None) or doc.currency
    party = doc.party
    payment = Payment.objects.create(
        company=company,
        payment_code=next_code(company, "PAY"),
        amount=amount,
        currency=currency,
        payment_date=payment_date or timezone.localdate(),
        payment_method=payment_method,
        party_type=doc.PARTY_TYPE,
        party_name=party.name if party else "",
        balance_due_before=before,
        balance_due_after=doc.balance_due,
        recorded_by=user,
        # invoice=doc or bill=doc
        **{doc.REFERENCE_TYPE.lower(): doc},
        **{key: value for key, value in metadata.items() if value is not None},
    )

    _stamp_last_payment(doc, payment)
    doc.save(update_fields=DOCUMENT_PAYMENT_FIELDS)

    log_action(
        action="record_payment",
        instance=payment,
        user=user,
        changes={
            "document": doc.number,
            "amount": amount,
            "balance_due_before": before,
            "balance_due_after": doc.balance_due,
            "status": doc.status,
        },
    )
    logger.info(
        "%s of %s applied to %s, balance due %s -> %s (%s)",
        payment.payment_code, amount, doc.number, before, doc.balance_due, doc.status,
    )
    return payment, doc


@atomic_unit
def record_invoice_payment(company, invoice_number, amount, *, user=None,
                           payment_date=None, payment_method="CASH", **metadata):
    """Money received from a customer. Returns ``(payment, invoice)``."""
    return _apply_payment(
        Invoice, company, invoice_number, amount, user=user,
        payment_date=payment_date, payment_method=payment_method, metadata=metadata)


@atomic_unit
def record_bill_payment(company, bill_number, amount, *, user=None,
                        payment_date=None, payment_method="CASH", **metadata):
    """Money paid to a supplier. Returns ``(payment, bill)``."""
    return _apply_payment(
        Bill, company, bill_number, amount, user=user,
        payment_date=payment_date, payment_method=payment_method, metadata=metadata)


@atomic_unit
def cancel_payment(company, payment_code, *, user=None, reason=""):
    """
    Reverse a payment: flag it CANCELLED and take its amount back off the
    document in the same atomic unit. Cancelling twice is rejected.
    """
    payment = lock_active(Payment, company, payment_code=payment_code)
    if payment.is_cancelled:
        raise IllegalTransitionError(
            f"Payment {payment_code} is already cancelled.",
            current=payment.status, attempted="CANCELLED", payment_code=payment_code)

    # The document may have been deactivated since; the reversal still applies
    doc_model = Invoice if payment.invoice_id else Bill
    doc = doc_model.objects.select_for_update().get(
        pk=payment.invoice_id or payment.bill_id)

    before = doc.balance_due
    doc.amount_paid = max(doc.amount_paid - payment.amount, Decimal("0.00"))
    doc.balance_due = doc.total_amount - doc.amount_paid
    doc.status = derive_status(
        doc.total_amount, doc.amount_paid, doc.status, open_status=doc.OPEN_STATUS)

    note = f"Cancelled: {reason}" if reason else "Cancelled"
    payment.status = "CANCELLED"
    payment.cancelled_at = timezone.now()
    payment.cancelled_by = user
    payment.notes = f"{payment.notes}\n{note}".strip()
    payment.save(update_fields=["status", "notes", "cancelled_at", "cancelled_by"])

    # fall back to the latest payment still standing
    _stamp_last_payment(doc, doc.payments.filter(status="COMPLETED")
                        .order_by("-payment_date", "-id").first())
    doc.save(update_fields=DOCUMENT_PAYMENT_FIELDS)

    log_action(
        action="cancel_payment",
        instance=payment,
        user=user,
        changes={
            "document": doc.number,
            "amount": payment.amount,
            "balance_due_before": before,
            "balance_due_after": doc.balance_due,
            "status": doc.status,
            "reason": reason,
        },
    )
    logger.info(
        "%s cancelled, %s balance due %s -> %s (%s)",
        payment_code, doc.number, before, doc.balance_due, doc.status,
    )
    return payment, doc

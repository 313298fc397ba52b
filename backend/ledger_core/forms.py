from django import forms

from .exceptions import InvalidInputError
from .models.expense import EXPENSE_STATUS_CHOICES
from .models.inventory import MOVEMENT_TYPE_CHOICES
from .models.payment import PAYMENT_METHOD_CHOICES
from .models.pettycash import PETTY_CASH_TXN_TYPE_CHOICES

REFERENCE_TYPE_CHOICES = [("INVOICE", "Invoice"), ("BILL", "Bill")]
REPORT_CHOICES = [
    ("expenses", "Expense stats"),
    ("petty_cash", "Petty cash summary"),
    ("payments", "Payment summary"),
    ("stock_movements", "Stock movement summary"),
    ("receivables", "Invoices by status"),
    ("payables", "Bills by status"),
    ("verify", "Ledger verification"),
]


# ---------- Payload forms for the named ledger operations ----------
# Amount signs and balances are checked by services.validation,
# these only check shape and types.

class StockMovementForm(forms.Form):
    item_code = forms.CharField(max_length=20)
    movement_type = forms.ChoiceField(choices=MOVEMENT_TYPE_CHOICES)
    quantity = forms.DecimalField(max_digits=14, decimal_places=4)
    to_location = forms.IntegerField(required=False)  # Location pk, TRANSFER only
    unit_cost = forms.DecimalField(max_digits=18, decimal_places=4, required=False)
    reference = forms.CharField(max_length=100, required=False)
    notes = forms.CharField(required=False)


class PaymentForm(forms.Form):
    reference_type = forms.ChoiceField(choices=REFERENCE_TYPE_CHOICES)
    document_number = forms.CharField(max_length=64)
    amount = forms.DecimalField(max_digits=18, decimal_places=2)
    payment_date = forms.DateField(required=False)
    payment_method = forms.ChoiceField(choices=PAYMENT_METHOD_CHOICES, required=False)
    currency = forms.CharField(max_length=10, required=False)
    transaction_ref = forms.CharField(max_length=100, required=False)
    bank_name = forms.CharField(max_length=100, required=False)
    cheque_number = forms.CharField(max_length=30, required=False)
    cheque_date = forms.DateField(required=False)
    upi_id = forms.CharField(max_length=100, required=False)
    receipt_url = forms.URLField(required=False, assume_scheme="https")
    notes = forms.CharField(required=False)


class CancelPaymentForm(forms.Form):
    payment_code = forms.CharField(max_length=20)
    reason = forms.CharField(required=False)


class PettyCashTransactionForm(forms.Form):
    account_code = forms.CharField(max_length=20)
    transaction_type = forms.ChoiceField(choices=PETTY_CASH_TXN_TYPE_CHOICES)
    # may be negative for ADJUSTMENT
    amount = forms.DecimalField(max_digits=18, decimal_places=2)
    transaction_date = forms.DateField(required=False)
    description = forms.CharField(max_length=255, required=False)
    category = forms.CharField(max_length=50, required=False)
    recipient_name = forms.CharField(max_length=200, required=False)
    receipt_number = forms.CharField(max_length=50, required=False)
    receipt_url = forms.URLField(required=False, assume_scheme="https")
    approved_by = forms.CharField(max_length=200, required=False)
    notes = forms.CharField(required=False)


class ExpenseStatusForm(forms.Form):
    expense_code = forms.CharField(max_length=20)
    status = forms.ChoiceField(choices=EXPENSE_STATUS_CHOICES)
    reason = forms.CharField(required=False)
    payment_method = forms.ChoiceField(choices=PAYMENT_METHOD_CHOICES, required=False)
    payment_date = forms.DateField(required=False)


class SummaryForm(forms.Form):
    report = forms.ChoiceField(choices=REPORT_CHOICES)
    from_date = forms.DateField(required=False)
    to_date = forms.DateField(required=False)
    account_code = forms.CharField(max_length=20, required=False)

    def clean(self):
        cleaned = super().clean()
        start, end = cleaned.get("from_date"), cleaned.get("to_date")
        if start and end and start > end:
            self.add_error("to_date", "to_date must not be before from_date.")
        return cleaned


def clean_payload(form_class, payload):
    """Validate ``payload`` with ``form_class``; the first error becomes InvalidInputError."""
    payload = payload or {}
    form = form_class(payload)
    if not form.is_valid():
        field, errors = next(iter(form.errors.items()))
        raise InvalidInputError(
            f"{field}: {errors[0]}", field=field, value=payload.get(field))
    return form.cleaned_data

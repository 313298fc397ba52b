from decimal import Decimal
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .bill import Bill
from .entitymembership import Company
from .invoice import Invoice

PAYMENT_METHOD_CHOICES = [
    ("CASH", "Cash"),
    ("CHEQUE", "Cheque"),
    ("BANK_TRANSFER", "Bank transfer"),
    ("UPI", "UPI"),
    ("CARD", "Card"),
    ("OTHER", "Other"),
]

PAYMENT_STATUS_CHOICES = [
    ("COMPLETED", "Completed"),
    ("CANCELLED", "Cancelled"),
]

PARTY_TYPE_CHOICES = [
    ("CUSTOMER", "Customer"),
    ("SUPPLIER", "Supplier"),
]

# Only the cancellation path may touch a stored payment
CANCELLATION_FIELDS = {"status", "notes", "cancelled_at", "cancelled_by"}


# ---------- Payments ----------
class Payment(models.Model):
    """
    Money received against an invoice or paid against a bill.

    Exactly one of ``invoice`` / ``bill`` is set. A payment is never
    edited or deleted; a mistake is undone by cancelling it, which reverses
    its effect on the document.
    """

    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    payment_code = models.CharField(max_length=20)  # PAY0001

    invoice = models.ForeignKey(
        Invoice, null=True, blank=True,
        on_delete=models.PROTECT, related_name="payments",
    )
    bill = models.ForeignKey(
        Bill, null=True, blank=True,
        on_delete=models.PROTECT, related_name="payments",
    )

    amount = models.DecimalField(max_digits=18, decimal_places=2)
    currency = models.CharField(max_length=10, default="INR")
    payment_date = models.DateField()
    payment_method = models.CharField(
        max_length=20, choices=PAYMENT_METHOD_CHOICES, default="CASH"
    )

    # Instrument details, all optional
    transaction_ref = models.CharField(max_length=100, blank=True)
    bank_name = models.CharField(max_length=100, blank=True)
    cheque_number = models.CharField(max_length=30, blank=True)
    cheque_date = models.DateField(null=True, blank=True)
    upi_id = models.CharField(max_length=100, blank=True)

    # Copied from the customer / supplier when recorded
    party_type = models.CharField(max_length=10, choices=PARTY_TYPE_CHOICES)
    party_name = models.CharField(max_length=200, blank=True)

    status = models.CharField(
        max_length=10, choices=PAYMENT_STATUS_CHOICES, default="COMPLETED"
    )

    # Document balance around this payment
    balance_due_before = models.DecimalField(max_digits=18, decimal_places=2)
    balance_due_after = models.DecimalField(max_digits=18, decimal_places=2)

    notes = models.TextField(blank=True)
    receipt_url = models.URLField(blank=True)

    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True,
        on_delete=models.SET_NULL, related_name="recorded_payments",
    )
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancelled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True,
        on_delete=models.SET_NULL, related_name="cancelled_payments",
    )

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        ordering = ("created_at", "id")
        indexes = [
            models.Index(fields=["company", "status"], name="payment_company_status_idx"),
            models.Index(fields=["company", "payment_date"], name="payment_company_date_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "payment_code"], name="uq_company_payment_code"
            ),
            # Exactly one target document
            models.CheckConstraint(
                condition=(
                    models.Q(invoice__isnull=False, bill__isnull=True)
                    | models.Q(invoice__isnull=True, bill__isnull=False)
                ),
                name="payment_single_document",
            ),
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="payment_positive_amount",
            ),
        ]

    def __str__(self):
        return f"{self.payment_code} {self.amount} -> {self.document}"

    @property
    def document(self):
        return self.invoice if self.invoice_id else self.bill

    @property
    def reference_type(self):
        return "INVOICE" if self.invoice_id else "BILL"

    @property
    def is_cancelled(self):
        return self.status == "CANCELLED"

    @property
    def signed_effect(self):
        """Contribution to the document's amount_paid."""
        return Decimal("0.00") if self.is_cancelled else self.amount

    def clean(self):
        if bool(self.invoice_id) == bool(self.bill_id):
            raise ValidationError(
                "Payment must reference exactly one invoice or bill.")
        doc = self.document
        if doc is not None and doc.company_id != self.company_id:
            raise ValidationError("Payment.company must match document company")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            update_fields = kwargs.get("update_fields")
            if update_fields is None or not set(update_fields) <= CANCELLATION_FIELDS:
                raise ValidationError(
                    "Payments are immutable; only cancellation may update them.")
            return super().save(*args, **kwargs)
        self.full_clean()
        return super().save(*args, **kwargs)

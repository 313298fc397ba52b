from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import models


# ---------- Shared shape of invoices and bills ----------
class PayableDocument(models.Model):
    """
    Balance entity settled by Payments.

    Invariant kept by services.payment:
        amount_paid == sum(completed payments)
        balance_due == total_amount - amount_paid
    """

    # Subclasses set these
    NUMBER_FIELD = None     # "invoice_number" / "bill_number"
    OPEN_STATUS = None      # status a fully-unpaid document falls back to
    PARTY_TYPE = None       # "CUSTOMER" / "SUPPLIER"
    REFERENCE_TYPE = None   # "INVOICE" / "BILL"

    due_date = models.DateField(null=True, blank=True)
    currency = models.CharField(max_length=10, default="INR")

    # Grand total incl. taxes, fixed once any payment is applied
    total_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    # Running sum of completed payments
    amount_paid = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    # Unpaid amount after payments are applied
    balance_due = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    # Copied from the most recent completed payment, cleared when none is left
    last_payment_date = models.DateField(null=True, blank=True)
    last_payment_method = models.CharField(max_length=20, blank=True)
    last_payment_ref = models.CharField(max_length=100, blank=True)

    notes = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=0)
                & models.Q(amount_paid__gte=0)
                & models.Q(balance_due__gte=0),
                name="%(class)s_non_negative_amounts",
            ),
        ]

    @property
    def number(self):
        return getattr(self, self.NUMBER_FIELD)

    @property
    def party(self):
        raise NotImplementedError

    def clean(self):
        if self.amount_paid > self.total_amount:
            raise ValidationError("Amount paid cannot exceed total amount.")
        if self.balance_due != self.total_amount - self.amount_paid:
            raise ValidationError("Balance due must equal total amount minus amount paid.")

        # Total is frozen once money has been applied against it
        if not self._state.adding:
            orig = type(self).objects.only("total_amount").get(pk=self.pk)
            if orig.total_amount != self.total_amount and self.payments.exists():
                raise ValidationError(
                    f"Cannot change total of {self} after payments were recorded.")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)

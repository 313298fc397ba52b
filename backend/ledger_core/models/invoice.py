from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .customer import Customer
from .document import PayableDocument
from .entitymembership import Company

# PARTIALLY_PAID and PAID follow amount_paid and are never set by hand.
INV_STATUS_CHOICES = [
    ("DRAFT", "Draft"),
    ("SENT", "Sent"),
    ("PARTIALLY_PAID", "Partially paid"),
    ("PAID", "Paid"),
    ("OVERDUE", "Overdue"),
    ("CANCELLED", "Cancelled"),
]


class Invoice(PayableDocument):
    """Sales invoice raised on a customer; payments bring balance_due down."""

    NUMBER_FIELD = "invoice_number"
    OPEN_STATUS = "SENT"
    PARTY_TYPE = "CUSTOMER"
    REFERENCE_TYPE = "INVOICE"

    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    customer = models.ForeignKey(
        Customer,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="invoices",
    )
    invoice_number = models.CharField(max_length=64)  # INV0001
    invoice_date = models.DateField()
    status = models.CharField(max_length=20, choices=INV_STATUS_CHOICES, default="DRAFT")

    objects = TenantManager()

    class Meta(PayableDocument.Meta):
        indexes = [
            models.Index(fields=["company", "status"], name="invoice_company_status_idx"),
            models.Index(fields=["company", "customer"], name="invoice_company_customer_idx"),
        ]
        constraints = PayableDocument.Meta.constraints + [
            models.UniqueConstraint(
                fields=["company", "invoice_number"], name="uq_invoice_company_number"
            ),
        ]

    def __str__(self):
        return f"Invoice {self.invoice_number}"

    @property
    def party(self):
        return self.customer

    def clean(self):
        if self.customer_id and self.customer.company_id != self.company_id:
            raise ValidationError("Customer must belong to the same company.")
        super().clean()

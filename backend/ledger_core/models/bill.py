from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .document import PayableDocument
from .entitymembership import Company
from .supplier import Supplier

BILL_STATUS_CHOICES = [
    ("DRAFT", "Draft"),
    ("RECEIVED", "Received"),
    ("PARTIALLY_PAID", "Partially paid"),
    ("PAID", "Paid"),
    ("OVERDUE", "Overdue"),
    ("CANCELLED", "Cancelled"),
]


class Bill(PayableDocument):
    """Purchase bill from a supplier (yarn, dyeing, job work)."""

    NUMBER_FIELD = "bill_number"
    OPEN_STATUS = "RECEIVED"
    PARTY_TYPE = "SUPPLIER"
    REFERENCE_TYPE = "BILL"

    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    supplier = models.ForeignKey(
        Supplier,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="bills",
    )
    bill_number = models.CharField(max_length=64)  # BILL0001, ours
    supplier_reference = models.CharField(max_length=64, blank=True)  # theirs
    bill_date = models.DateField()
    status = models.CharField(max_length=20, choices=BILL_STATUS_CHOICES, default="DRAFT")

    objects = TenantManager()

    class Meta(PayableDocument.Meta):
        indexes = [
            models.Index(fields=["company", "status"], name="bill_company_status_idx"),
            models.Index(fields=["company", "supplier"], name="bill_company_supplier_idx"),
        ]
        constraints = PayableDocument.Meta.constraints + [
            models.UniqueConstraint(
                fields=["company", "bill_number"], name="uq_bill_company_number"
            ),
        ]

    def __str__(self):
        return f"Bill {self.bill_number}"

    @property
    def party(self):
        return self.supplier

    def clean(self):
        if self.supplier_id and self.supplier.company_id != self.company_id:
            raise ValidationError("Supplier must belong to the same company.")
        super().clean()

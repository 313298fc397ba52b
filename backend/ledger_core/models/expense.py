from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .entitymembership import Company
from .location import Location
from .payment import PAYMENT_METHOD_CHOICES

EXPENSE_CATEGORY_CHOICES = [
    ("RENT", "Rent"),
    ("UTILITIES", "Utilities"),
    ("SALARIES", "Salaries"),
    ("EQUIPMENT", "Equipment"),
    ("SUPPLIES", "Supplies"),
    ("MAINTENANCE", "Maintenance"),
    ("TRAVEL", "Travel"),
    ("MARKETING", "Marketing"),
    ("INSURANCE", "Insurance"),
    ("TAXES", "Taxes"),
    ("RAW_MATERIALS", "Raw materials"),
    ("SHIPPING", "Shipping"),
    ("PROFESSIONAL_SERVICES", "Professional services"),
    ("MISCELLANEOUS", "Miscellaneous"),
]

EXPENSE_STATUS_CHOICES = [
    ("PENDING", "Pending"),
    ("APPROVED", "Approved"),
    ("REJECTED", "Rejected"),
    ("PAID", "Paid"),
    ("CANCELLED", "Cancelled"),
]


# ---------- Expenses ----------
class Expense(models.Model):
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    expense_code = models.CharField(max_length=20)  # EXP0001
    location = models.ForeignKey(
        Location, null=True, blank=True,
        on_delete=models.PROTECT, related_name="expenses",
    )

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=30, choices=EXPENSE_CATEGORY_CHOICES)
    amount = models.DecimalField(max_digits=18, decimal_places=2)
    currency = models.CharField(max_length=10, default="INR")
    expense_date = models.DateField()

    # Moved only through services.expense.change_expense_status
    status = models.CharField(
        max_length=10, choices=EXPENSE_STATUS_CHOICES, default="PENDING"
    )
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True,
        on_delete=models.SET_NULL, related_name="approved_expenses",
    )
    approved_at = models.DateTimeField(null=True, blank=True)
    rejected_reason = models.TextField(blank=True)

    payment_method = models.CharField(
        max_length=20, choices=PAYMENT_METHOD_CHOICES, blank=True
    )
    payment_date = models.DateField(null=True, blank=True)
    employee_name = models.CharField(max_length=200, blank=True)
    receipt_url = models.URLField(blank=True)
    notes = models.TextField(blank=True)

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "status"], name="expense_company_status_idx"),
            models.Index(fields=["company", "category"], name="expense_company_category_idx"),
            models.Index(fields=["company", "expense_date"], name="expense_company_date_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "expense_code"], name="uq_company_expense_code"
            ),
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="expense_positive_amount",
            ),
        ]

    def __str__(self):
        return f"{self.expense_code} {self.title} ({self.status})"

    def clean(self):
        if self.location_id and self.location.company_id != self.company_id:
            raise ValidationError(
                "Location must belong to the same company as the expense.")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)

from decimal import Decimal
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .entitymembership import Company
from .location import Location

PETTY_CASH_TXN_TYPE_CHOICES = [
    ("REPLENISHMENT", "Replenishment"),  # cash topped up
    ("DISBURSEMENT", "Disbursement"),    # cash paid out
    ("ADJUSTMENT", "Adjustment"),        # signed correction after a count
]


# ---------- Petty cash accounts ----------
class PettyCashAccount(models.Model):  # Cash box held at a site
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    account_code = models.CharField(max_length=20)  # PCA001
    location = models.ForeignKey(
        Location, null=True, blank=True,
        on_delete=models.PROTECT, related_name="petty_cash_accounts",
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    currency = models.CharField(max_length=10, default="INR")

    # Cash in the box when the account was opened
    initial_balance = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    # Cached running balance, only ever written by services.pettycash
    current_balance = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    # Replenishments may not push the balance above this
    max_limit = models.DecimalField(
        max_digits=18, decimal_places=2, null=True, blank=True
    )
    # Below this the caller gets a warning, not an error
    min_balance = models.DecimalField(
        max_digits=18, decimal_places=2, null=True, blank=True
    )

    custodian = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True,
        on_delete=models.SET_NULL, related_name="petty_cash_accounts",
    )
    custodian_name = models.CharField(max_length=200, blank=True)

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "is_active"], name="pca_company_active_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "account_code"], name="uq_company_petty_cash_code"
            ),
            models.CheckConstraint(
                condition=models.Q(current_balance__gte=0)
                & models.Q(initial_balance__gte=0),
                name="petty_cash_non_negative_balance",
            ),
        ]

    def __str__(self):
        return f"{self.account_code} {self.name}"

    def clean(self):
        if self.location_id and self.location.company_id != self.company_id:
            raise ValidationError(
                "Location must belong to the same company as the account.")
        if (self.max_limit is not None and self.min_balance is not None
                and self.min_balance > self.max_limit):
            raise ValidationError("Minimum balance cannot exceed the max limit.")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)


# ---------- Petty cash transactions (append-only) ----------
class PettyCashTransaction(models.Model):
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    transaction_code = models.CharField(max_length=20)  # PCT0001
    account = models.ForeignKey(
        PettyCashAccount, on_delete=models.PROTECT, related_name="transactions"
    )
    transaction_type = models.CharField(
        max_length=20, choices=PETTY_CASH_TXN_TYPE_CHOICES
    )
    # Always stored positive; for ADJUSTMENT the sign lives in the snapshot
    amount = models.DecimalField(max_digits=18, decimal_places=2)

    balance_before = models.DecimalField(max_digits=18, decimal_places=2)
    balance_after = models.DecimalField(max_digits=18, decimal_places=2)

    transaction_date = models.DateField()
    description = models.CharField(max_length=255, blank=True)
    category = models.CharField(max_length=50, blank=True)  # tea, courier, cartage
    recipient_name = models.CharField(max_length=200, blank=True)
    receipt_number = models.CharField(max_length=50, blank=True)
    receipt_url = models.URLField(blank=True)
    approved_by = models.CharField(max_length=200, blank=True)
    notes = models.TextField(blank=True)

    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        ordering = ("created_at", "id")
        indexes = [
            models.Index(fields=["company", "account"], name="pct_company_account_idx"),
            models.Index(fields=["company", "transaction_type"], name="pct_company_type_idx"),
            models.Index(fields=["company", "transaction_date"], name="pct_company_date_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "transaction_code"],
                name="uq_company_petty_cash_txn_code",
            ),
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="petty_cash_txn_positive_amount",
            ),
            models.CheckConstraint(
                condition=models.Q(balance_after__gte=0),
                name="petty_cash_txn_non_negative_result",
            ),
        ]

    def __str__(self):
        return f"{self.transaction_code} {self.transaction_type} {self.amount}"

    @property
    def signed_effect(self):
        return self.balance_after - self.balance_before

    def clean(self):
        if self.account_id and self.account.company_id != self.company_id:
            raise ValidationError(
                "PettyCashTransaction.company must match Account.company")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Petty cash transactions are immutable.")
        self.full_clean()
        return super().save(*args, **kwargs)

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .entitymembership import Company

AUDIT_ACTION_CHOICES = [
    ("create", "Create"),
    ("update", "Update"),
    ("deactivate", "Deactivate"),
    ("delete", "Delete"),
    ("status_change", "Status change"),
    ("record_movement", "Stock movement"),
    ("record_payment", "Payment"),
    ("cancel_payment", "Payment cancellation"),
    ("record_petty_cash", "Petty cash transaction"),
]


# ---------- Audit trail (append-only) ----------
class AuditLog(models.Model):
    """One row per ledger write, committed in the same transaction as the write."""

    # Kept when the company row goes away
    company = models.ForeignKey(
        Company, null=True, blank=True, on_delete=models.SET_NULL
    )
    # Empty for automated writes (celery task, seed command)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL
    )
    action = models.CharField(max_length=50, choices=AUDIT_ACTION_CHOICES)
    object_type = models.CharField(max_length=100)  # "StockMovement", "Invoice"...
    object_id = models.CharField(max_length=100)
    # Amounts and before/after balances, Decimals stored as strings
    changes = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        ordering = ("-created_at", "-id")
        indexes = [
            models.Index(fields=["company", "user"], name="auditlog_company_user_idx"),
            models.Index(fields=["company", "created_at"], name="auditlog_company_created_idx"),
            models.Index(fields=["object_type", "object_id"], name="auditlog_object_idx"),
        ]

    def __str__(self):
        return (f"[{self.created_at:%Y-%m-%d %H:%M}] {self.user or 'system'} "
                f"{self.action} {self.object_type}({self.object_id})")

    def clean(self):
        # An actor must belong to the company whose ledger they touched
        if self.user_id and self.company_id:
            if not self.user.memberships.filter(
                company_id=self.company_id, is_active=True
            ).exists():
                raise ValidationError(
                    f"{self.user} is not an active member of {self.company}.")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Audit rows are never rewritten.")
        self.full_clean()
        return super().save(*args, **kwargs)

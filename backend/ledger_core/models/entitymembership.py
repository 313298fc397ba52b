from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager


def default_currency():
    return settings.ERP_DEFAULT_CURRENCY


class Company(models.Model):
    """A tenant. Every ledger row hangs off exactly one company."""

    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=80, unique=True)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="owned_companies",
    )
    # stamped on invoices, bills and petty cash accounts created without one
    currency_code = models.CharField(max_length=10, default=default_currency)
    # a suspended company keeps its history but records nothing new
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = "companies"

    def __str__(self):
        return self.name


class EntityMembership(models.Model):
    """Grants a user a role inside one company."""

    ROLE_CHOICES = [
        ("owner", "Owner"),
        ("admin", "Admin"),
        ("accountant", "Accountant"),  # posts movements, payments, petty cash
        ("viewer", "Viewer"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="memberships"
    )
    company = models.ForeignKey(
        "Company", on_delete=models.CASCADE, related_name="memberships"
    )
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default="viewer")
    # used by CurrentCompanyMiddleware when the session names no company
    is_default = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = TenantManager()

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["user", "company"], name="uq_user_company_membership"
            ),
            models.UniqueConstraint(
                fields=["user"],
                condition=models.Q(is_default=True),
                name="uq_user_default_membership",
            ),
        ]
        indexes = [
            models.Index(fields=["company", "user"], name="membership_company_user_idx"),
        ]

    def __str__(self):
        return f"{self.user} @ {self.company} ({self.role})"

    def clean(self):
        if self.is_default and not self.is_active:
            raise ValidationError("An inactive membership cannot be the default.")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

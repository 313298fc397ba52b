from django.db import models
from ..managers import TenantManager
from .entitymembership import Company


class Customer(models.Model):
    """Fabric buyer billed through invoices. Names are unique per company."""

    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    name = models.CharField(max_length=200)
    contact_email = models.EmailField(null=True, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    gstin = models.CharField(max_length=20, blank=True)
    # new invoices fall due this many days after issue
    payment_terms_days = models.IntegerField(default=30)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = TenantManager()

    class Meta:
        indexes = [models.Index(fields=["company", "name"], name="customer_company_name_idx")]
        constraints = [
            models.UniqueConstraint(fields=["company", "name"], name="uq_company_customer_name"),
        ]

    def __str__(self):
        return self.name

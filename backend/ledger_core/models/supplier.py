from django.db import models
from ..managers import TenantManager
from .entitymembership import Company


class Supplier(models.Model):
    """Yarn mill, dye house or trim vendor that sends bills."""

    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    name = models.CharField(max_length=200)
    contact_email = models.EmailField(null=True, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    gstin = models.CharField(max_length=20, blank=True)
    payment_terms_days = models.IntegerField(default=30)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = TenantManager()

    class Meta:
        indexes = [models.Index(fields=["company", "name"], name="supplier_company_name_idx")]
        constraints = [
            models.UniqueConstraint(fields=["company", "name"], name="uq_company_supplier_name"),
        ]

    def __str__(self):
        return self.name

from django.db import models
from ..managers import TenantManager
from .entitymembership import Company

LOCATION_TYPE_CHOICES = [
    ("HEAD_OFFICE", "Head office"),
    ("FACTORY", "Factory"),
    ("WAREHOUSE", "Warehouse"),
    ("SHOP", "Shop"),
]


class Location(models.Model):
    """A site that holds stock: mill floor, godown, retail counter."""

    company = models.ForeignKey(Company, on_delete=models.CASCADE, related_name="locations")
    name = models.CharField(max_length=200)
    location_type = models.CharField(max_length=20, choices=LOCATION_TYPE_CHOICES, default="WAREHOUSE")
    address = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = TenantManager()

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["company", "name"], name="uq_company_location_name"),
        ]
        indexes = [models.Index(fields=["company", "is_active"], name="location_company_active_idx")]

    def __str__(self):
        return f"{self.name} ({self.get_location_type_display()})"

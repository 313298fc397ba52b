from django.db import models
from .entitymembership import Company


# ---------- Per-tenant code counters ----------
class CodeSequence(models.Model):
    """
    One counter row per (company, prefix), e.g. (acme, "PAY").
    Incremented under a row lock by services.codes.next_code(),
    so two concurrent payments can never be issued the same PAY code.
    """
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    prefix = models.CharField(max_length=10)  # "PAY", "PCT", "PCA", ...
    last_value = models.PositiveIntegerField(default=0)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["company", "prefix"], name="uq_company_code_prefix"
            ),
        ]

    def __str__(self):
        return f"{self.company_id}:{self.prefix}={self.last_value}"

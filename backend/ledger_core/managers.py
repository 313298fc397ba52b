from django.db import models


class TenantQuerySet(models.QuerySet):
    """Company-scoped lookups shared by every tenant-owned model."""

    def for_company(self, company):
        return self.filter(company=company)

    def active(self, company):
        # is_active=False rows stay for history, they just can't be picked
        return self.for_company(company).filter(is_active=True)


class TenantManager(models.Manager.from_queryset(TenantQuerySet)):
    pass

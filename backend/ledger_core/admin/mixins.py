class TenantAdminMixin:
    """
    Scope an admin to request.company (set by CurrentCompanyMiddleware).

    Superusers see every tenant. Everyone else sees their current company
    only, picks related rows from it only, and can't move a row to
    another company.
    """

    def _company(self, request):
        return getattr(request, "company", None)

    def _unscoped(self, request):
        return request.user.is_superuser

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        if self._unscoped(request):
            return qs
        company = self._company(request)
        # no current company, nothing to show
        return qs.filter(company=company) if company is not None else qs.none()

    def get_readonly_fields(self, request, obj=None):
        fields = list(super().get_readonly_fields(request, obj))
        if not self._unscoped(request) and "company" not in fields:
            fields.append("company")
        return fields

    def formfield_for_foreignkey(self, db_field, request, **kwargs):
        # Dropdowns list the current company's active locations,
        # customers, suppliers, items...
        related = db_field.related_model
        if not self._unscoped(request) and hasattr(related, "company"):
            company = self._company(request)
            manager = related._default_manager
            if company is None:
                kwargs["queryset"] = manager.none()
            elif hasattr(manager, "active") and hasattr(related, "is_active"):
                kwargs["queryset"] = manager.active(company)
            else:
                kwargs["queryset"] = manager.filter(company=company)
        return super().formfield_for_foreignkey(db_field, request, **kwargs)

    def save_model(self, request, obj, form, change):
        # company is read-only for tenant users, stamp it here
        if not self._unscoped(request) and not change:
            obj.company = self._company(request)
        super().save_model(request, obj, form, change)

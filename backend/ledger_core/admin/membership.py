from django.contrib import admin

from ledger_core.models import Company, EntityMembership, Location
from .mixins import TenantAdminMixin


def _managed_company_ids(user):
    return set(
        user.memberships.filter(role__in=("owner", "admin"), is_active=True)
        .values_list("company_id", flat=True)
    )


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "slug", "currency_code", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name", "slug")
    ordering = ("name",)

    def get_queryset(self, request):
        qs = super().get_queryset(request).prefetch_related("memberships__user")
        if request.user.is_superuser:
            return qs
        return qs.filter(
            memberships__user=request.user, memberships__is_active=True
        ).distinct()


@admin.register(EntityMembership)
class EntityMembershipAdmin(TenantAdminMixin, admin.ModelAdmin):
    """Owners and admins manage who can post to their company's ledgers."""

    list_display = ("user", "company", "role", "is_default", "is_active", "created_at")
    list_filter = ("role", "is_active", "is_default")
    search_fields = ("user__username", "user__email", "company__name")
    readonly_fields = ("created_at",)
    ordering = ("company__name", "user__username")
    list_select_related = ("company", "user")

    def has_change_permission(self, request, obj=None):
        if request.user.is_superuser:
            return True
        managed = _managed_company_ids(request.user)
        return bool(managed) if obj is None else obj.company_id in managed

    def has_delete_permission(self, request, obj=None):
        return self.has_change_permission(request, obj)

    def has_add_permission(self, request):
        return self.has_change_permission(request)


@admin.register(Location)
class LocationAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("name", "company", "location_type", "is_active")
    list_filter = ("location_type", "is_active")
    search_fields = ("name", "address")

from django.contrib import admin
from django.core.exceptions import PermissionDenied

from .mixins import TenantAdminMixin


class ReadOnlyAdmin(TenantAdminMixin, admin.ModelAdmin):
    """
    Browse movement and audit rows in the admin.

    Rows are written by the ledger services only, so the admin offers no
    add, edit or delete. Subclasses may still declare actions that call a
    service (cancel a payment, for instance).
    """

    list_per_page = 50

    def get_readonly_fields(self, request, obj=None):
        return [field.name for field in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        # the change view doubles as the detail page
        return True

    def has_delete_permission(self, request, obj=None):
        return False

    def save_model(self, request, obj, form, change):
        raise PermissionDenied(f"{obj._meta.verbose_name} rows are append-only.")

    def get_actions(self, request):
        actions = super().get_actions(request)
        actions.pop("delete_selected", None)
        return actions

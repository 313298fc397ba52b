from django.contrib import admin

from ledger_core.models import PettyCashAccount, PettyCashTransaction
from .mixins import TenantAdminMixin
from .readonly import ReadOnlyAdmin


@admin.register(PettyCashAccount)
class PettyCashAccountAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("account_code", "name", "location", "current_balance",
                    "min_balance", "max_limit", "custodian_name", "is_active")
    list_filter = ("is_active",)
    search_fields = ("account_code", "name", "custodian_name")
    # Balances move only through petty cash transactions
    readonly_fields = ("account_code", "initial_balance", "current_balance",
                       "created_at", "updated_at")

    def has_add_permission(self, request):
        return False


@admin.register(PettyCashTransaction)
class PettyCashTransactionAdmin(ReadOnlyAdmin):
    list_display = ("transaction_code", "account", "transaction_type", "amount",
                    "balance_before", "balance_after", "transaction_date")
    list_filter = ("transaction_type",)
    search_fields = ("transaction_code", "account__account_code",
                     "recipient_name", "receipt_number")

from django.contrib import admin

from ledger_core.models import Expense
from .actions import approve_expenses, pay_expenses, reject_expenses
from .mixins import TenantAdminMixin


@admin.register(Expense)
class ExpenseAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("expense_code", "title", "category", "amount",
                    "expense_date", "status", "approved_by")
    list_filter = ("status", "category")
    search_fields = ("expense_code", "title", "employee_name")
    # Status moves only through the approve / reject / pay actions
    readonly_fields = ("expense_code", "status", "approved_by", "approved_at",
                       "rejected_reason", "created_at", "updated_at")
    actions = [approve_expenses, reject_expenses, pay_expenses]

    def has_add_permission(self, request):
        return False

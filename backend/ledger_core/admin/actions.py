from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _

from ledger_core.exceptions import LedgerError
from ledger_core.services import (cancel_bill, cancel_invoice, cancel_payment,
                                  change_expense_status, receive_bill,
                                  send_invoice)

# ---------- Admin actions ----------
# Every action goes through the services, one atomic unit per row,
# so one failure doesn't stop the whole batch.


def _run_for_each(modeladmin, request, queryset, label, apply):
    success = 0
    failures = 0
    for obj in queryset:
        try:
            apply(obj)
            success += 1
        except LedgerError as exc:
            failures += 1
            modeladmin.message_user(
                request,
                _("Could not %(label)s %(obj)s: %(err)s") % {
                    "label": label, "obj": obj, "err": exc.message},
                level=messages.ERROR,
            )

    # Final summary message
    modeladmin.message_user(
        request,
        _("%(label)s: %(success)d done, %(failures)d failed.") % {
            "label": label.capitalize(), "success": success, "failures": failures},
        level=messages.SUCCESS if failures == 0 else messages.WARNING,
    )


@admin.action(description="Approve selected expenses")
def approve_expenses(modeladmin, request, queryset):
    _run_for_each(modeladmin, request, queryset, "approve",
                  lambda e: change_expense_status(e.company, e.expense_code, "APPROVED",
                                                  user=request.user))


@admin.action(description="Reject selected expenses")
def reject_expenses(modeladmin, request, queryset):
    _run_for_each(modeladmin, request, queryset, "reject",
                  lambda e: change_expense_status(e.company, e.expense_code, "REJECTED",
                                                  user=request.user,
                                                  reason="Rejected from admin"))


@admin.action(description="Mark selected expenses as paid")
def pay_expenses(modeladmin, request, queryset):
    _run_for_each(modeladmin, request, queryset, "mark paid",
                  lambda e: change_expense_status(e.company, e.expense_code, "PAID",
                                                  user=request.user))


@admin.action(description="Cancel selected payments (reverses the document balance)")
def cancel_payments(modeladmin, request, queryset):
    _run_for_each(modeladmin, request, queryset, "cancel",
                  lambda p: cancel_payment(p.company, p.payment_code, user=request.user,
                                           reason="Cancelled from admin"))


@admin.action(description="Mark selected invoices as sent")
def send_invoices(modeladmin, request, queryset):
    _run_for_each(modeladmin, request, queryset, "send",
                  lambda i: send_invoice(i.company, i.invoice_number, user=request.user))


@admin.action(description="Cancel selected invoices")
def cancel_invoices(modeladmin, request, queryset):
    _run_for_each(modeladmin, request, queryset, "cancel",
                  lambda i: cancel_invoice(i.company, i.invoice_number, user=request.user))


@admin.action(description="Mark selected bills as received")
def receive_bills(modeladmin, request, queryset):
    _run_for_each(modeladmin, request, queryset, "receive",
                  lambda b: receive_bill(b.company, b.bill_number, user=request.user))


@admin.action(description="Cancel selected bills")
def cancel_bills(modeladmin, request, queryset):
    _run_for_each(modeladmin, request, queryset, "cancel",
                  lambda b: cancel_bill(b.company, b.bill_number, user=request.user))

from django.contrib import admin

from ledger_core.models import Bill, Customer, Invoice, Payment, Supplier
from .actions import (cancel_bills, cancel_invoices, cancel_payments,
                      receive_bills, send_invoices)
from .mixins import TenantAdminMixin
from .readonly import ReadOnlyAdmin

# Amounts and status follow the payments, never edited by hand
DOCUMENT_READONLY = ("total_amount", "amount_paid", "balance_due", "status",
                     "last_payment_date", "last_payment_method", "last_payment_ref",
                     "created_at", "updated_at")


@admin.register(Customer)
class CustomerAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("name", "contact_email", "gstin", "payment_terms_days", "is_active")
    search_fields = ("name", "contact_email", "gstin")


@admin.register(Supplier)
class SupplierAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("name", "contact_email", "gstin", "payment_terms_days", "is_active")
    search_fields = ("name", "contact_email", "gstin")


class PaymentInline(admin.TabularInline):
    # Read-only history of payments on the document
    model = Payment
    extra = 0
    can_delete = False
    fields = ("payment_code", "amount", "payment_date", "payment_method", "status")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Invoice)
class InvoiceAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("invoice_number", "customer", "invoice_date", "due_date",
                    "total_amount", "amount_paid", "balance_due", "status")
    list_filter = ("status",)
    search_fields = ("invoice_number", "customer__name")
    readonly_fields = ("invoice_number",) + DOCUMENT_READONLY
    inlines = [PaymentInline]
    actions = [send_invoices, cancel_invoices]

    # Invoices get their number and balance from create_invoice
    def has_add_permission(self, request):
        return False


@admin.register(Bill)
class BillAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("bill_number", "supplier", "supplier_reference", "bill_date",
                    "due_date", "total_amount", "amount_paid", "balance_due", "status")
    list_filter = ("status",)
    search_fields = ("bill_number", "supplier__name", "supplier_reference")
    readonly_fields = ("bill_number",) + DOCUMENT_READONLY
    inlines = [PaymentInline]
    actions = [receive_bills, cancel_bills]

    def has_add_permission(self, request):
        return False


@admin.register(Payment)
class PaymentAdmin(ReadOnlyAdmin):
    list_display = ("payment_code", "reference_type", "document", "amount",
                    "payment_method", "payment_date", "status")
    list_filter = ("status", "payment_method")
    search_fields = ("payment_code", "invoice__invoice_number", "bill__bill_number",
                     "party_name", "transaction_ref")
    actions = [cancel_payments]

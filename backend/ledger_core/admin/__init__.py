from .actions import (approve_expenses, cancel_bills, cancel_invoices,
                      cancel_payments, pay_expenses, receive_bills,
                      reject_expenses, send_invoices)
from .auditlog import AuditLogAdmin
from .documents import (BillAdmin, CustomerAdmin, InvoiceAdmin, PaymentAdmin,
                        SupplierAdmin)
from .expense import ExpenseAdmin
from .inventory import InventoryItemAdmin, StockMovementAdmin
from .membership import CompanyAdmin, EntityMembershipAdmin, LocationAdmin
from .mixins import TenantAdminMixin
from .pettycash import PettyCashAccountAdmin, PettyCashTransactionAdmin
from .readonly import ReadOnlyAdmin

from .codes import next_code
from .coordinator import atomic_unit, atomically, lock_active, resolve_active
from .documents import (cancel_bill, cancel_invoice, create_bill,
                        create_invoice, mark_overdue, receive_bill,
                        send_invoice)
from .expense import (change_expense_status, create_expense, delete_expense,
                      update_expense)
from .payment import cancel_payment, record_bill_payment, record_invoice_payment
from .pettycash import (create_petty_cash_account,
                        create_petty_cash_transaction,
                        update_petty_cash_account)
from .reporting import (document_summary, expense_stats, payment_summary,
                        petty_cash_summary, stock_movement_summary,
                        verify_ledgers)
from .stock import (create_inventory_item, deactivate_inventory_item,
                    record_stock_movement)

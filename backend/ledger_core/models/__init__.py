from .auditlog import AuditLog
from .bill import Bill
from .customer import Customer
from .entitymembership import Company, EntityMembership
from .expense import Expense
from .inventory import InventoryItem, StockMovement
from .invoice import Invoice
from .location import Location
from .payment import Payment
from .pettycash import PettyCashAccount, PettyCashTransaction
from .sequence import CodeSequence
from .supplier import Supplier

from decimal import Decimal

import django.db.models.deletion
import ledger_core.models.entitymembership
from django.conf import settings
from django.db import migrations, models


PAYMENT_METHODS = [
    ("CASH", "Cash"),
    ("CHEQUE", "Cheque"),
    ("BANK_TRANSFER", "Bank transfer"),
    ("UPI", "UPI"),
    ("CARD", "Card"),
    ("OTHER", "Other"),
]

AUDIT_ACTIONS = [
    ("create", "Create"),
    ("update", "Update"),
    ("deactivate", "Deactivate"),
    ("delete", "Delete"),
    ("status_change", "Status change"),
    ("record_movement", "Stock movement"),
    ("record_payment", "Payment"),
    ("cancel_payment", "Payment cancellation"),
    ("record_petty_cash", "Petty cash transaction"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Company",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("slug", models.SlugField(max_length=80, unique=True)),
                ("currency_code", models.CharField(
                    default=ledger_core.models.entitymembership.default_currency, max_length=10)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("owner", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="owned_companies", to=settings.AUTH_USER_MODEL)),
            ],
            options={"verbose_name_plural": "companies"},
        ),
        migrations.CreateModel(
            name="EntityMembership",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("role", models.CharField(choices=[("owner", "Owner"), ("admin", "Admin"), ("accountant", "Accountant"), ("viewer", "Viewer")], default="viewer", max_length=20)),
                ("is_default", models.BooleanField(default=False)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="memberships", to="ledger_core.company")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="memberships", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "indexes": [models.Index(fields=["company", "user"], name="membership_company_user_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("user", "company"), name="uq_user_company_membership"),
                    models.UniqueConstraint(condition=models.Q(("is_default", True)), fields=("user",), name="uq_user_default_membership"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Location",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("location_type", models.CharField(choices=[("HEAD_OFFICE", "Head office"), ("FACTORY", "Factory"), ("WAREHOUSE", "Warehouse"), ("SHOP", "Shop")], default="WAREHOUSE", max_length=20)),
                ("address", models.TextField(blank=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="locations", to="ledger_core.company")),
            ],
            options={
                "indexes": [models.Index(fields=["company", "is_active"], name="location_company_active_idx")],
                "constraints": [models.UniqueConstraint(fields=("company", "name"), name="uq_company_location_name")],
            },
        ),
        migrations.CreateModel(
            name="CodeSequence",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("prefix", models.CharField(max_length=10)),
                ("last_value", models.PositiveIntegerField(default=0)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
            ],
            options={
                "constraints": [models.UniqueConstraint(fields=("company", "prefix"), name="uq_company_code_prefix")],
            },
        ),
        migrations.CreateModel(
            name="Customer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("contact_email", models.EmailField(blank=True, max_length=254, null=True)),
                ("phone", models.CharField(blank=True, max_length=32)),
                ("gstin", models.CharField(blank=True, max_length=20)),
                ("payment_terms_days", models.IntegerField(default=30)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
            ],
            options={
                "indexes": [models.Index(fields=["company", "name"], name="customer_company_name_idx")],
                "constraints": [models.UniqueConstraint(fields=("company", "name"), name="uq_company_customer_name")],
            },
        ),
        migrations.CreateModel(
            name="Supplier",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("contact_email", models.EmailField(blank=True, max_length=254, null=True)),
                ("phone", models.CharField(blank=True, max_length=32)),
                ("gstin", models.CharField(blank=True, max_length=20)),
                ("payment_terms_days", models.IntegerField(default=30)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
            ],
            options={
                "indexes": [models.Index(fields=["company", "name"], name="supplier_company_name_idx")],
                "constraints": [models.UniqueConstraint(fields=("company", "name"), name="uq_company_supplier_name")],
            },
        ),
        migrations.CreateModel(
            name="InventoryItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("item_code", models.CharField(max_length=20)),
                ("sku", models.CharField(blank=True, max_length=80, null=True)),
                ("name", models.CharField(max_length=200)),
                ("category", models.CharField(choices=[("RAW_MATERIAL", "Raw material (fibre, cotton bales)"), ("YARN", "Yarn"), ("FABRIC", "Fabric"), ("DYES_CHEMICALS", "Dyes & chemicals"), ("ACCESSORIES", "Trims & accessories"), ("SEMI_FINISHED", "Semi-finished"), ("FINISHED_GOODS", "Finished goods (garments)"), ("PACKAGING", "Packaging"), ("OTHER", "Other")], default="OTHER", max_length=20)),
                ("description", models.TextField(blank=True)),
                ("uom", models.CharField(default="KG", max_length=16)),
                ("opening_stock", models.DecimalField(decimal_places=4, default=Decimal("0"), max_digits=14)),
                ("current_stock", models.DecimalField(decimal_places=4, default=Decimal("0"), max_digits=14)),
                ("reorder_level", models.DecimalField(blank=True, decimal_places=4, max_digits=14, null=True)),
                ("unit_cost", models.DecimalField(decimal_places=4, default=Decimal("0.00"), max_digits=18)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
                ("location", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="items", to="ledger_core.location")),
            ],
            options={
                "indexes": [
                    models.Index(fields=["company", "name"], name="item_company_name_idx"),
                    models.Index(fields=["company", "category"], name="item_company_category_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "item_code"), name="uq_company_item_code"),
                    models.UniqueConstraint(fields=("company", "sku"), name="uq_company_item_sku"),
                    models.CheckConstraint(condition=models.Q(("current_stock__gte", 0), ("opening_stock__gte", 0)), name="item_non_negative_stock"),
                ],
            },
        ),
        migrations.CreateModel(
            name="StockMovement",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("movement_code", models.CharField(max_length=20)),
                ("movement_type", models.CharField(choices=[("RECEIPT", "Receipt"), ("ISSUE", "Issue"), ("TRANSFER", "Transfer"), ("ADJUSTMENT", "Adjustment"), ("RETURN", "Return")], max_length=20)),
                ("quantity", models.DecimalField(decimal_places=4, max_digits=14)),
                ("previous_stock", models.DecimalField(decimal_places=4, max_digits=14)),
                ("new_stock", models.DecimalField(decimal_places=4, max_digits=14)),
                ("unit_cost", models.DecimalField(blank=True, decimal_places=4, max_digits=18, null=True)),
                ("reference", models.CharField(blank=True, max_length=100)),
                ("notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
                ("item", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="movements", to="ledger_core.inventoryitem")),
                ("from_location", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="outgoing_movements", to="ledger_core.location")),
                ("to_location", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="incoming_movements", to="ledger_core.location")),
                ("recorded_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ("created_at", "id"),
                "indexes": [
                    models.Index(fields=["company", "item"], name="movement_company_item_idx"),
                    models.Index(fields=["company", "movement_type"], name="movement_company_type_idx"),
                    models.Index(fields=["company", "created_at"], name="movement_company_created_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "movement_code"), name="uq_company_movement_code"),
                    models.CheckConstraint(condition=models.Q(("quantity__gt", 0)), name="movement_positive_quantity"),
                    models.CheckConstraint(condition=models.Q(("new_stock__gte", 0)), name="movement_non_negative_result"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Invoice",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("due_date", models.DateField(blank=True, null=True)),
                ("currency", models.CharField(default="INR", max_length=10)),
                ("total_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("amount_paid", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("balance_due", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("last_payment_date", models.DateField(blank=True, null=True)),
                ("last_payment_method", models.CharField(blank=True, max_length=20)),
                ("last_payment_ref", models.CharField(blank=True, max_length=100)),
                ("notes", models.TextField(blank=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("invoice_number", models.CharField(max_length=64)),
                ("invoice_date", models.DateField()),
                ("status", models.CharField(choices=[("DRAFT", "Draft"), ("SENT", "Sent"), ("PARTIALLY_PAID", "Partially paid"), ("PAID", "Paid"), ("OVERDUE", "Overdue"), ("CANCELLED", "Cancelled")], default="DRAFT", max_length=20)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
                ("customer", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="invoices", to="ledger_core.customer")),
            ],
            options={
                "abstract": False,
                "indexes": [
                    models.Index(fields=["company", "status"], name="invoice_company_status_idx"),
                    models.Index(fields=["company", "customer"], name="invoice_company_customer_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("total_amount__gte", 0), ("amount_paid__gte", 0), ("balance_due__gte", 0)), name="invoice_non_negative_amounts"),
                    models.UniqueConstraint(fields=("company", "invoice_number"), name="uq_invoice_company_number"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Bill",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("due_date", models.DateField(blank=True, null=True)),
                ("currency", models.CharField(default="INR", max_length=10)),
                ("total_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("amount_paid", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("balance_due", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("last_payment_date", models.DateField(blank=True, null=True)),
                ("last_payment_method", models.CharField(blank=True, max_length=20)),
                ("last_payment_ref", models.CharField(blank=True, max_length=100)),
                ("notes", models.TextField(blank=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("bill_number", models.CharField(max_length=64)),
                ("supplier_reference", models.CharField(blank=True, max_length=64)),
                ("bill_date", models.DateField()),
                ("status", models.CharField(choices=[("DRAFT", "Draft"), ("RECEIVED", "Received"), ("PARTIALLY_PAID", "Partially paid"), ("PAID", "Paid"), ("OVERDUE", "Overdue"), ("CANCELLED", "Cancelled")], default="DRAFT", max_length=20)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
                ("supplier", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="bills", to="ledger_core.supplier")),
            ],
            options={
                "abstract": False,
                "indexes": [
                    models.Index(fields=["company", "status"], name="bill_company_status_idx"),
                    models.Index(fields=["company", "supplier"], name="bill_company_supplier_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("total_amount__gte", 0), ("amount_paid__gte", 0), ("balance_due__gte", 0)), name="bill_non_negative_amounts"),
                    models.UniqueConstraint(fields=("company", "bill_number"), name="uq_bill_company_number"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("payment_code", models.CharField(max_length=20)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=18)),
                ("currency", models.CharField(default="INR", max_length=10)),
                ("payment_date", models.DateField()),
                ("payment_method", models.CharField(choices=PAYMENT_METHODS, default="CASH", max_length=20)),
                ("transaction_ref", models.CharField(blank=True, max_length=100)),
                ("bank_name", models.CharField(blank=True, max_length=100)),
                ("cheque_number", models.CharField(blank=True, max_length=30)),
                ("cheque_date", models.DateField(blank=True, null=True)),
                ("upi_id", models.CharField(blank=True, max_length=100)),
                ("party_type", models.CharField(choices=[("CUSTOMER", "Customer"), ("SUPPLIER", "Supplier")], max_length=10)),
                ("party_name", models.CharField(blank=True, max_length=200)),
                ("status", models.CharField(choices=[("COMPLETED", "Completed"), ("CANCELLED", "Cancelled")], default="COMPLETED", max_length=10)),
                ("balance_due_before", models.DecimalField(decimal_places=2, max_digits=18)),
                ("balance_due_after", models.DecimalField(decimal_places=2, max_digits=18)),
                ("notes", models.TextField(blank=True)),
                ("receipt_url", models.URLField(blank=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
                ("invoice", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="payments", to="ledger_core.invoice")),
                ("bill", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="payments", to="ledger_core.bill")),
                ("recorded_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="recorded_payments", to=settings.AUTH_USER_MODEL)),
                ("cancelled_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="cancelled_payments", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ("created_at", "id"),
                "indexes": [
                    models.Index(fields=["company", "status"], name="payment_company_status_idx"),
                    models.Index(fields=["company", "payment_date"], name="payment_company_date_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "payment_code"), name="uq_company_payment_code"),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("bill__isnull", True), ("invoice__isnull", False)),
                            models.Q(("bill__isnull", False), ("invoice__isnull", True)),
                            _connector="OR",
                        ),
                        name="payment_single_document",
                    ),
                    models.CheckConstraint(condition=models.Q(("amount__gt", 0)), name="payment_positive_amount"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PettyCashAccount",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("account_code", models.CharField(max_length=20)),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                ("currency", models.CharField(default="INR", max_length=10)),
                ("initial_balance", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("current_balance", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("max_limit", models.DecimalField(blank=True, decimal_places=2, max_digits=18, null=True)),
                ("min_balance", models.DecimalField(blank=True, decimal_places=2, max_digits=18, null=True)),
                ("custodian_name", models.CharField(blank=True, max_length=200)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
                ("location", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="petty_cash_accounts", to="ledger_core.location")),
                ("custodian", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="petty_cash_accounts", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "indexes": [models.Index(fields=["company", "is_active"], name="pca_company_active_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "account_code"), name="uq_company_petty_cash_code"),
                    models.CheckConstraint(condition=models.Q(("current_balance__gte", 0), ("initial_balance__gte", 0)), name="petty_cash_non_negative_balance"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PettyCashTransaction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("transaction_code", models.CharField(max_length=20)),
                ("transaction_type", models.CharField(choices=[("REPLENISHMENT", "Replenishment"), ("DISBURSEMENT", "Disbursement"), ("ADJUSTMENT", "Adjustment")], max_length=20)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=18)),
                ("balance_before", models.DecimalField(decimal_places=2, max_digits=18)),
                ("balance_after", models.DecimalField(decimal_places=2, max_digits=18)),
                ("transaction_date", models.DateField()),
                ("description", models.CharField(blank=True, max_length=255)),
                ("category", models.CharField(blank=True, max_length=50)),
                ("recipient_name", models.CharField(blank=True, max_length=200)),
                ("receipt_number", models.CharField(blank=True, max_length=50)),
                ("receipt_url", models.URLField(blank=True)),
                ("approved_by", models.CharField(blank=True, max_length=200)),
                ("notes", models.TextField(blank=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
                ("account", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="transactions", to="ledger_core.pettycashaccount")),
                ("recorded_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ("created_at", "id"),
                "indexes": [
                    models.Index(fields=["company", "account"], name="pct_company_account_idx"),
                    models.Index(fields=["company", "transaction_type"], name="pct_company_type_idx"),
                    models.Index(fields=["company", "transaction_date"], name="pct_company_date_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "transaction_code"), name="uq_company_petty_cash_txn_code"),
                    models.CheckConstraint(condition=models.Q(("amount__gt", 0)), name="petty_cash_txn_positive_amount"),
                    models.CheckConstraint(condition=models.Q(("balance_after__gte", 0)), name="petty_cash_txn_non_negative_result"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Expense",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("expense_code", models.CharField(max_length=20)),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                ("category", models.CharField(choices=[("RENT", "Rent"), ("UTILITIES", "Utilities"), ("SALARIES", "Salaries"), ("EQUIPMENT", "Equipment"), ("SUPPLIES", "Supplies"), ("MAINTENANCE", "Maintenance"), ("TRAVEL", "Travel"), ("MARKETING", "Marketing"), ("INSURANCE", "Insurance"), ("TAXES", "Taxes"), ("RAW_MATERIALS", "Raw materials"), ("SHIPPING", "Shipping"), ("PROFESSIONAL_SERVICES", "Professional services"), ("MISCELLANEOUS", "Miscellaneous")], max_length=30)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=18)),
                ("currency", models.CharField(default="INR", max_length=10)),
                ("expense_date", models.DateField()),
                ("status", models.CharField(choices=[("PENDING", "Pending"), ("APPROVED", "Approved"), ("REJECTED", "Rejected"), ("PAID", "Paid"), ("CANCELLED", "Cancelled")], default="PENDING", max_length=10)),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
                ("rejected_reason", models.TextField(blank=True)),
                ("payment_method", models.CharField(blank=True, choices=PAYMENT_METHODS, max_length=20)),
                ("payment_date", models.DateField(blank=True, null=True)),
                ("employee_name", models.CharField(blank=True, max_length=200)),
                ("receipt_url", models.URLField(blank=True)),
                ("notes", models.TextField(blank=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
                ("location", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="expenses", to="ledger_core.location")),
                ("approved_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="approved_expenses", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "indexes": [
                    models.Index(fields=["company", "status"], name="expense_company_status_idx"),
                    models.Index(fields=["company", "category"], name="expense_company_category_idx"),
                    models.Index(fields=["company", "expense_date"], name="expense_company_date_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "expense_code"), name="uq_company_expense_code"),
                    models.CheckConstraint(condition=models.Q(("amount__gt", 0)), name="expense_positive_amount"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("action", models.CharField(choices=AUDIT_ACTIONS, max_length=50)),
                ("object_type", models.CharField(max_length=100)),
                ("object_id", models.CharField(max_length=100)),
                ("changes", models.JSONField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to="ledger_core.company")),
                ("user", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ("-created_at", "-id"),
                "indexes": [
                    models.Index(fields=["company", "user"], name="auditlog_company_user_idx"),
                    models.Index(fields=["company", "created_at"], name="auditlog_company_created_idx"),
                    models.Index(fields=["object_type", "object_id"], name="auditlog_object_idx"),
                ],
            },
        ),
    ]

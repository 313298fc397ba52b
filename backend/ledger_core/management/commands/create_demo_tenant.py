from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils.text import slugify

from ledger_core.models import (Company, Customer, EntityMembership, Location,
                                Supplier)
from ledger_core.services import (create_bill, create_expense,
                                  create_inventory_item, create_invoice,
                                  create_petty_cash_account, receive_bill,
                                  send_invoice)

User = get_user_model()


def free_slug(name, attempts=100):
    """demo-textiles, then demo-textiles-1, demo-textiles-2..."""
    base = slugify(name) or "company"
    candidates = [base] + [f"{base}-{n}" for n in range(1, attempts + 1)]
    taken = set(
        Company.objects.filter(slug__startswith=base).values_list("slug", flat=True)
    )
    for slug in candidates:
        if slug not in taken:
            return slug
    raise CommandError(f"No free slug for {name!r} after {attempts} attempts")


class Command(BaseCommand):
    help = (
        "Create a textile company with an owner login and a little of everything: "
        "two sites, a yarn item with opening stock, an open invoice and bill, "
        "a petty cash box and a pending expense."
    )

    def add_arguments(self, parser):
        parser.add_argument("--company-name", default="Demo Textiles")
        parser.add_argument("--username", default="demo")
        parser.add_argument("--password", default="demo123")

    @transaction.atomic
    def handle(self, *args, **options):
        company_name = options["company_name"]
        username = options["username"]
        password = options["password"]

        user, created = User.objects.get_or_create(
            username=username,
            defaults={"email": f"{username}@example.com"},
        )
        if created:
            user.set_password(password)
            user.save()
            self.stdout.write(f"Created user {user.username} (password {password})")
        else:
            self.stdout.write(f"Reusing user {user.username}")

        company = Company.objects.create(
            name=company_name, slug=free_slug(company_name), owner=user
        )
        has_default = user.memberships.filter(is_default=True).exists()
        EntityMembership.objects.create(
            user=user, company=company, role="owner", is_default=not has_default
        )
        self.stdout.write(f"Created company {company} ({company.slug})")

        warehouse = Location.objects.create(
            company=company, name="Main Warehouse", location_type="WAREHOUSE")
        Location.objects.create(company=company, name="Weaving Unit", location_type="FACTORY")
        customer = Customer.objects.create(company=company, name="Sample Garments Pvt Ltd")
        supplier = Supplier.objects.create(company=company, name="Sample Spinning Mills")

        # through the services, so codes, ledgers and audit rows start consistent
        item = create_inventory_item(
            company, "Cotton yarn 40s combed", user=user, category="YARN", uom="KG",
            opening_stock=Decimal("500"), unit_cost=Decimal("285.50"),
            reorder_level=Decimal("100"), location=warehouse,
        )
        self.stdout.write(f"Created item {item}")

        invoice = create_invoice(company, Decimal("118000.00"), customer=customer, user=user)
        send_invoice(company, invoice.invoice_number, user=user)
        bill = create_bill(company, Decimal("54000.00"), supplier=supplier,
                           supplier_reference="SSM/2024/118", user=user)
        receive_bill(company, bill.bill_number, user=user)
        self.stdout.write(f"Created invoice {invoice.invoice_number} and bill {bill.bill_number}")

        account = create_petty_cash_account(
            company, "Factory petty cash", user=user, location=warehouse,
            initial_balance=Decimal("10000.00"), max_limit=Decimal("25000.00"),
            min_balance=Decimal("2000.00"), custodian=user,
        )
        self.stdout.write(f"Created petty cash account {account}")

        expense = create_expense(
            company, "Boiler maintenance", "MAINTENANCE", Decimal("7500.00"), user=user,
            location=warehouse,
        )
        self.stdout.write(f"Created expense {expense}")
        self.stdout.write(self.style.SUCCESS(f"{company.slug} is ready."))

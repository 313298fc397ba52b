from django.core.management.base import BaseCommand, CommandError

from ledger_core.models import Company
from ledger_core.services import verify_ledgers


class Command(BaseCommand):
    help = (
        "Recompute every cached balance from its movements and report drift. "
        "Read only: nothing is corrected. Exits non-zero when drift is found."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--company",
            help="Slug of one company to check (default: every active company).",
        )

    def handle(self, *args, **options):
        companies = Company.objects.filter(is_active=True).order_by("slug")
        if options["company"]:
            companies = companies.filter(slug=options["company"])
            if not companies.exists():
                raise CommandError(f"No active company with slug {options['company']!r}")

        drift = 0
        for company in companies:
            problems = verify_ledgers(company)
            if not problems:
                self.stdout.write(self.style.SUCCESS(f"{company.slug}: all ledgers balance"))
                continue
            drift += len(problems)
            for p in problems:
                self.stdout.write(self.style.ERROR(
                    f"{company.slug}: {p['entity']} {p['code']} {p['field']} "
                    f"is {p['cached']}, movements say {p['expected']}"
                ))

        if drift:
            raise CommandError(f"{drift} ledger discrepancies found")

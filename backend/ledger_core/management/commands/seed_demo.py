from django.core.management import call_command
from django.core.management.base import BaseCommand


class Command(BaseCommand):
    help = "Load a demo textile company and reconcile its ledgers afterwards."

    def add_arguments(self, parser):
        parser.add_argument("--company", default="Demo Textiles")
        parser.add_argument(
            "--no-verify",
            action="store_true",
            help="Skip the verify_ledgers run after seeding.",
        )

    def handle(self, *args, **options):
        name = options["company"]
        self.stdout.write(self.style.NOTICE(f"Seeding {name}..."))
        call_command("create_demo_tenant", company_name=name, stdout=self.stdout)
        if not options["no_verify"]:
            call_command("verify_ledgers", stdout=self.stdout)
        self.stdout.write(self.style.SUCCESS("Demo data seeded."))

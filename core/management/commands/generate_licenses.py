"""
Django management command to pre-issue a batch of inactive licenses.
"""

from asgiref.sync import async_to_sync
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from core.domain.exceptions import DomainException
from licenses.application.commands.generate_licenses import GenerateLicensesCommand
from licenses.application.handlers.generate_licenses_handler import GenerateLicensesHandler
from licenses.infrastructure.repositories.django_license_store import DjangoLicenseStore


class Command(BaseCommand):
    """Command to generate inactive licenses."""

    help = "Generate inactive license keys and print them one per line"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument("count", type=int, help="Number of licenses to generate")
        parser.add_argument(
            "--email",
            type=str,
            default=None,
            help="Email that owns every generated license",
        )

    def handle(self, *args, **options):
        """Handle command execution."""
        handler = GenerateLicensesHandler(
            license_store=DjangoLicenseStore(),
            max_batch_size=settings.LICENSE_MAX_BATCH_SIZE,
        )
        try:
            result = async_to_sync(handler.handle)(
                GenerateLicensesCommand(count=options["count"], email=options["email"])
            )
        except DomainException as e:
            raise CommandError(f"{e.code}: {e.message}") from e

        for key in result.keys:
            self.stdout.write(key)
        self.stderr.write(self.style.SUCCESS(f"Generated {result.count} license(s)"))

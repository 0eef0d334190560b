import typing as t

from django.core.management.base import BaseCommand

from events.services import ReconciliationService
from events.stores import DjangoEventStore, DjangoUserStore


class Command(BaseCommand):
    help = "Find and repair diverged event/marketer back-references."

    def add_arguments(self, parser: t.Any) -> None:
        """Add arguments to this command."""
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Only report divergences, do not repair them.",
        )

    def handle(self, *args: t.Any, **options: t.Any) -> None:
        """Handle."""
        service = ReconciliationService(DjangoEventStore(), DjangoUserStore())
        divergences = service.scan()
        if not divergences:
            self.stdout.write(self.style.SUCCESS("No divergences found."))
            return

        for divergence in divergences:
            self.stdout.write(
                f"{divergence.kind.value}: event={divergence.event_id} user={divergence.user_id}"
            )
        if options["dry_run"]:
            self.stdout.write(self.style.WARNING(f"{len(divergences)} divergence(s) found, not repaired."))
            return

        result = service.repair(divergences)
        self.stdout.write(self.style.SUCCESS(f"Repaired {len(result.repaired)} divergence(s)."))
        if result.failed:
            self.stdout.write(self.style.ERROR(f"{len(result.failed)} divergence(s) could not be repaired."))

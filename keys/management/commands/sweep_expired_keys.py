"""
Django management command to mark expired keys.

Runs one janitor sweep on demand, outside the Celery schedule.
"""

import asyncio
import logging

from django.core.management.base import BaseCommand

from core.metrics import janitor_sweeps_total, keys_expired_total
from keys.domain.key import utcnow
from keys.domain.services import KeyJanitor
from keys.infrastructure.repositories.django_key_repository import DjangoKeyRepository

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to mark active keys past their expiry time as expired."""

    help = "Mark active keys past their expiry time as expired"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Dry run mode - list the keys without changing them",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        repository = DjangoKeyRepository()
        now = utcnow()

        if options["dry_run"]:
            candidates = asyncio.run(repository.find_expired_active(now))
            self.stdout.write(f"Found {len(candidates)} expired key(s)")
            # pylint: disable=no-member
            self.stdout.write(self.style.WARNING("DRY RUN - No changes will be made"))
            for key in candidates[:10]:
                self.stdout.write(f"  - Key {key.id} expired at {key.expires_at}")
            return

        expired = asyncio.run(KeyJanitor(repository).sweep(now))
        janitor_sweeps_total.labels(result="success").inc()
        keys_expired_total.inc(expired)

        self.stdout.write(
            # pylint: disable=no-member
            self.style.SUCCESS(f"Successfully marked {expired} key(s) as expired")
        )

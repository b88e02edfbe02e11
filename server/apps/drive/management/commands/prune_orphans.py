"""Management command to delete uploads no file record points to."""

import logging
from typing import Any

from django.core.management.base import BaseCommand

from server.apps.drive.infrastructure.locators import LocalLocator
from server.apps.drive.infrastructure.storage import LocalStorageBackend
from server.apps.drive.models import File, StorageKind

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Delete files on local disk that no File record references.

    Such files are left behind when discarding the bytes of a failed
    upload or a deleted record did not succeed.
    """

    help = 'Delete orphaned uploads from local storage'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be deleted without deleting',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the prune command.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        dry_run = options['dry_run']
        backend = LocalStorageBackend()

        referenced = set(
            File.objects.filter(
                storage_kind=StorageKind.LOCAL,
            ).values_list('local_path', flat=True),
        )
        orphans = sorted(set(backend.list_stored_paths()) - referenced)

        self.stdout.write(f'Found {len(orphans)} orphaned files')

        count = 0
        failed = 0

        for path in orphans:
            if dry_run:
                self.stdout.write(f'Would delete: {path}')
                count += 1
                continue

            if backend.discard(LocalLocator(path=path)):
                count += 1
                logger.info('Pruned orphaned upload: %s', path)
            else:
                self.stderr.write(f'Failed to delete {path}')
                failed += 1

        if dry_run:
            self.stdout.write(
                self.style.SUCCESS(f'Would prune {count} orphaned files'),
            )
        else:
            self.stdout.write(
                self.style.SUCCESS(
                    f'Pruned {count} orphaned files, {failed} failed',
                ),
            )

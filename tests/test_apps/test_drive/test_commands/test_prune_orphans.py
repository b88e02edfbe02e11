"""Tests for prune_orphans management command."""

from io import StringIO

import pytest
from django.core.files.base import ContentFile
from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import call_command

from server.apps.drive.infrastructure.storage import LocalStorageBackend
from server.apps.drive.logic.file_operations import create_file


@pytest.mark.django_db
class TestPruneOrphansCommand:
    """Tests for prune_orphans management command."""

    def test_prune_deletes_unreferenced_files(self, user, uploads_root):
        """Test files without a record are deleted, referenced ones kept."""
        kept = create_file(user.id, None, SimpleUploadedFile('a.txt', b'a'))
        orphan = LocalStorageBackend().place(
            user.id,
            ContentFile(b'orphan'),
            'b.txt',
        )

        out = StringIO()
        call_command('prune_orphans', stdout=out)

        assert (uploads_root / kept.local_path).exists()
        assert not (uploads_root / orphan.path).exists()
        assert 'Pruned 1 orphaned files, 0 failed' in out.getvalue()

    def test_dry_run_keeps_files(self, user, uploads_root):
        """Test dry run only reports what would be deleted."""
        orphan = LocalStorageBackend().place(
            user.id,
            ContentFile(b'orphan'),
            'b.txt',
        )

        out = StringIO()
        call_command('prune_orphans', '--dry-run', stdout=out)

        assert (uploads_root / orphan.path).exists()
        assert f'Would delete: {orphan.path}' in out.getvalue()
        assert 'Would prune 1 orphaned files' in out.getvalue()

    def test_nothing_to_prune(self, uploads_root):
        """Test an empty uploads root."""
        out = StringIO()
        call_command('prune_orphans', stdout=out)

        assert 'Pruned 0 orphaned files, 0 failed' in out.getvalue()

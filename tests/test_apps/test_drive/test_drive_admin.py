"""Tests for drive admin configuration."""

import pytest
from django.contrib import admin

from server.apps.drive.admin import FileAdmin, format_bytes
from server.apps.drive.models import File, Folder, StorageKind


def test_models_registered():
    """Test drive models are available in the admin site."""
    assert admin.site.is_registered(Folder)
    assert admin.site.is_registered(File)


@pytest.mark.parametrize(('size_bytes', 'expected'), [
    (0, '0 B'),
    (1023, '1023 B'),
    (1536, '1.5 KB'),
    (5 * 1024 * 1024, '5.0 MB'),
    (2 * 1024 * 1024 * 1024, '2.0 GB'),
])
def test_format_bytes(size_bytes, expected):
    """Test sizes are shown in the largest fitting unit."""
    assert format_bytes(size_bytes) == expected


def test_size_display():
    """Test the file list shows a readable size."""
    file_admin = FileAdmin(File, admin.site)

    assert file_admin.size_display(File(size_bytes=2048)) == '2.0 KB'


@pytest.mark.django_db
def test_file_changelist(admin_client, user):
    """Test the file list renders with the size column."""
    File.objects.create(user=user, name='notes.txt', storage_kind=StorageKind.NONE)

    response = admin_client.get('/admin/drive/file/')

    assert response.status_code == 200
    assert b'notes.txt' in response.content

"""Tests for Folder and File models."""

from io import StringIO

import pytest
from django.core.management import call_command
from django.db import IntegrityError, transaction

from server.apps.drive.infrastructure.locators import (
    EmptyLocator,
    LocalLocator,
    RemoteLocator,
)
from server.apps.drive.models import File, Folder, StorageKind


@pytest.mark.django_db
def test_folder_model_str(user):
    """Test Folder __str__ method."""
    folder = Folder.objects.create(user=user, name='Docs')

    assert str(folder) == f'{user.username}:Docs'
    assert folder.is_root


@pytest.mark.django_db
def test_folder_cascade_to_children(user):
    """Test deleting a folder row deletes its subtree rows."""
    parent = Folder.objects.create(user=user, name='Docs')
    child = Folder.objects.create(user=user, name='Reports', parent=parent)
    File.objects.create(
        user=user,
        folder=child,
        name='a.txt',
        storage_kind=StorageKind.NONE,
    )

    parent.delete()

    assert not Folder.objects.filter(id=child.id).exists()
    assert File.objects.count() == 0


@pytest.mark.django_db
def test_file_model_str(user):
    """Test File __str__ method."""
    file_instance = File.objects.create(
        user=user,
        name='a.txt',
        storage_kind=StorageKind.NONE,
    )

    assert str(file_instance) == f'{user.username}:a.txt'


@pytest.mark.django_db
@pytest.mark.parametrize('locator', [
    LocalLocator(path='1/1718000000000-1-a.txt'),
    RemoteLocator(
        url='https://file-drive.s3.amazonaws.com/file-uploader/user-1/a.txt',
        remote_id='file-uploader/user-1/a.txt',
    ),
    EmptyLocator(),
])
def test_file_locator_persists(user, locator):
    """Test the locator survives a save and reload unchanged."""
    file_instance = File(user=user, name='a.txt')
    file_instance.set_locator(locator)
    file_instance.save()

    file_instance.refresh_from_db()

    assert file_instance.locator == locator
    assert file_instance.storage_kind == locator.kind


@pytest.mark.django_db
def test_file_set_locator_clears_other_columns(user):
    """Test switching locators leaves no stale columns behind."""
    file_instance = File(user=user, name='a.txt')
    file_instance.set_locator(RemoteLocator(url='https://x.example/k', remote_id='k'))
    file_instance.set_locator(LocalLocator(path='1/a.txt'))

    assert file_instance.remote_url == ''
    assert file_instance.remote_id == ''
    assert file_instance.local_path == '1/a.txt'


@pytest.mark.django_db
def test_file_locator_constraint(user):
    """Test a local record without a path is rejected by the database."""
    with pytest.raises(IntegrityError), transaction.atomic():
        File.objects.create(
            user=user,
            name='a.txt',
            storage_kind=StorageKind.LOCAL,
        )


@pytest.mark.django_db
def test_file_mixed_locator_constraint(user):
    """Test a record cannot point at both backends."""
    with pytest.raises(IntegrityError), transaction.atomic():
        File.objects.create(
            user=user,
            name='a.txt',
            storage_kind=StorageKind.REMOTE,
            local_path='1/a.txt',
            remote_url='https://x.example/k',
            remote_id='k',
        )


@pytest.mark.django_db
def test_file_get_extension(user):
    """Test get_extension method extracts extension correctly."""
    file_instance = File.objects.create(
        user=user,
        name='test.PDF',
        storage_kind=StorageKind.NONE,
    )

    assert file_instance.get_extension() == 'pdf'


@pytest.mark.django_db
def test_migrations_match_models():
    """Test models have no changes missing from the migrations."""
    call_command(
        'makemigrations',
        'drive',
        '--check',
        '--dry-run',
        stdout=StringIO(),
    )

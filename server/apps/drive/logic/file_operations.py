"""Business logic for file operations."""

import logging
from pathlib import Path
from typing import Final

from django.core.files.base import File as DjangoFile
from django.db import DatabaseError, transaction
from django.db.models import QuerySet

from server.apps.drive.exceptions import (
    InvalidInputError,
    NotFoundError,
    NotFoundOnDiskError,
    PersistenceFailureError,
)
from server.apps.drive.infrastructure.locators import (
    DownloadInstruction,
    EmptyLocator,
    LocalDownload,
    LocalLocator,
    RedirectDownload,
    RemoteLocator,
)
from server.apps.drive.infrastructure.metadata import detect_mime_type
from server.apps.drive.infrastructure.storage import (
    LocalStorageBackend,
    RemoteStorageBackend,
    discard_locator,
    get_upload_backend,
)
from server.apps.drive.logic.folder_operations import resolve_parent
from server.apps.drive.logic.ownership import may_access
from server.apps.drive.models import File

_NAME_MAX_LENGTH: Final = 255

logger = logging.getLogger(__name__)


def create_file(
    owner_id: int,
    folder_id: int | None,
    uploaded: DjangoFile,
    display_name: str | None = None,
) -> File:
    """Store uploaded bytes and create the file record.

    Transaction safety: bytes are placed first, then the record is
    created. If the record cannot be written, the placed bytes are
    discarded before the error is raised. The record is committed
    before this function returns.

    Args:
        owner_id: ID of the owning user.
        folder_id: ID of the target folder, None for the root.
        uploaded: Uploaded bytes.
        display_name: Name shown in the drive. Defaults to the upload name.

    Returns:
        Created File instance.

    Raises:
        InvalidParentError: If the folder is missing or foreign.
        InvalidInputError: If the name is missing or the upload rejected.
        BackendUnavailableError: If the bytes could not be stored.
        PersistenceFailureError: If the record could not be written.
    """
    folder = resolve_parent(owner_id, folder_id)

    name = _clean_display_name(
        Path((display_name or uploaded.name or '').strip()).name,
    )
    mime_type = detect_mime_type(name, getattr(uploaded, 'content_type', None))

    backend = get_upload_backend()

    # Step 1: Store bytes first
    logger.info('Storing upload %s for user %d (%s)', name, owner_id, backend.kind)
    locator = backend.place(owner_id, uploaded, name)

    # Step 2: Create database record
    file_instance = File(
        user_id=owner_id,
        folder=folder,
        name=name,
        size_bytes=uploaded.size,
        mime_type=mime_type,
    )
    file_instance.set_locator(locator)
    try:
        with transaction.atomic():
            file_instance.save()
    except DatabaseError as exc:
        # Compensate: the bytes must not outlive the failed record
        logger.exception(
            'Database write failed, discarding stored bytes: %s',
            locator,
        )
        backend.discard(locator)
        raise PersistenceFailureError('Could not save file record') from exc

    logger.info(
        'File record created in database: %s (ID: %d)',
        name,
        file_instance.id,
    )
    return file_instance


def create_placeholder_file(
    owner_id: int,
    display_name: str,
    folder_id: int | None = None,
) -> File:
    """Create a file record without any stored bytes.

    Placeholder records have an empty locator and zero size.

    Args:
        owner_id: ID of the owning user.
        display_name: Name shown in the drive.
        folder_id: ID of the target folder, None for the root.

    Returns:
        Created File instance.

    Raises:
        InvalidParentError: If the folder is missing or foreign.
        InvalidInputError: If the name is blank or too long.
        PersistenceFailureError: If the record could not be written.
    """
    name = _clean_display_name(display_name)

    folder = resolve_parent(owner_id, folder_id)
    file_instance = File(user_id=owner_id, folder=folder, name=name, size_bytes=0)
    file_instance.set_locator(EmptyLocator())
    try:
        with transaction.atomic():
            file_instance.save()
    except DatabaseError as exc:
        logger.exception('Failed to create placeholder file %r', name)
        raise PersistenceFailureError('Could not save file record') from exc

    logger.info('Placeholder file created: %s (ID: %d)', name, file_instance.id)
    return file_instance


def get_file(owner_id: int, file_id: int) -> File:
    """Get a file owned by the principal.

    Args:
        owner_id: ID of the requesting user.
        file_id: ID of the file.

    Returns:
        File instance with its folder loaded.

    Raises:
        NotFoundError: If the file is missing or owned by someone else.
    """
    try:
        file_instance = File.objects.select_related('folder').get(id=file_id)
    except File.DoesNotExist as exc:
        raise NotFoundError('File not found') from exc

    if not may_access(owner_id, file_instance.user_id):
        logger.warning(
            'User %d requested file %d owned by someone else',
            owner_id,
            file_id,
        )
        raise NotFoundError('File not found')

    return file_instance


def delete_file(owner_id: int, file_id: int) -> File:
    """Delete file record and its stored bytes.

    Removal of the stored bytes is best effort. The record delete is
    what makes the file deleted for the caller.

    Args:
        owner_id: ID of the requesting user.
        file_id: ID of file to delete.

    Returns:
        The deleted File instance (``folder_id`` still set).

    Raises:
        NotFoundError: If the file is missing or foreign.
        PersistenceFailureError: If the record could not be deleted.
    """
    file_instance = get_file(owner_id, file_id)
    locator = file_instance.locator
    logger.info('Deleting file: ID=%d, locator=%s', file_id, locator)

    # Step 1: Remove stored bytes (failure is logged, not raised)
    discard_locator(locator)

    # Step 2: Delete database record
    try:
        with transaction.atomic():
            file_instance.delete()
    except DatabaseError as exc:
        logger.exception('Failed to delete file from database: ID=%d', file_id)
        raise PersistenceFailureError('Could not delete file record') from exc

    logger.info('File record deleted from database: ID=%d', file_id)
    return file_instance


def download_target(owner_id: int, file_id: int) -> DownloadInstruction:
    """Work out how the client gets the bytes of a file.

    Args:
        owner_id: ID of the requesting user.
        file_id: ID of the file.

    Returns:
        Redirect for remote files, local stream source for local files.

    Raises:
        NotFoundError: If the file is missing or foreign.
        NotFoundOnDiskError: If local bytes are gone or the record is a
            placeholder.
    """
    file_instance = get_file(owner_id, file_id)
    locator = file_instance.locator

    if isinstance(locator, RemoteLocator):
        url = RemoteStorageBackend().attachment_url(locator, file_instance.name)
        logger.debug('Redirecting download of file %d to blob store', file_id)
        return RedirectDownload(url=url)

    if isinstance(locator, LocalLocator):
        backend = LocalStorageBackend()
        if not backend.exists(locator):
            logger.warning(
                'File %d missing on disk: %s',
                file_id,
                locator.path,
            )
            raise NotFoundOnDiskError()
        return LocalDownload(
            path=backend.absolute_path(locator),
            filename=file_instance.name,
            mime_type=file_instance.mime_type,
        )

    raise NotFoundOnDiskError('File has no stored content')


def list_user_files(owner_id: int) -> QuerySet[File]:
    """List every file of a user regardless of folder.

    Args:
        owner_id: ID of the owning user.

    Returns:
        QuerySet of File objects, newest first.
    """
    return File.objects.filter(user_id=owner_id).order_by('-created_at', '-id')


def _clean_display_name(display_name: str | None) -> str:
    name = (display_name or '').strip()
    if not name:
        raise InvalidInputError('File name is required')
    if len(name) > _NAME_MAX_LENGTH:
        raise InvalidInputError(
            f'File name is longer than {_NAME_MAX_LENGTH} characters',
        )
    return name

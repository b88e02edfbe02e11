"""Storage backends for file bytes.

Two backends place and remove the raw bytes of a ``File`` record:

- ``LocalStorageBackend``: local filesystem, one directory per owner
- ``RemoteStorageBackend``: S3-compatible blob store via django-storages

``StorageBackend.discard`` is the only place where a failed removal is
tolerated: it logs the failure and lets the caller carry on.
"""

import abc
import logging
from typing import ClassVar, final, override
from urllib.parse import urlsplit

from boto3.exceptions import Boto3Error
from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.core.files.base import File as DjangoFile
from django.core.files.storage import FileSystemStorage, storages
from django.utils.http import content_disposition_header
from storages.backends.s3 import S3Storage

from server.apps.drive.exceptions import (
    BackendCleanupFailedError,
    BackendUnavailableError,
)
from server.apps.drive.infrastructure.locators import (
    LOCAL_KIND,
    REMOTE_KIND,
    EmptyLocator,
    LocalLocator,
    Locator,
    RemoteLocator,
)
from server.apps.drive.infrastructure.metadata import (
    generate_storage_name,
    validate_extension,
    validate_upload_size,
)

logger = logging.getLogger(__name__)

_S3_ERRORS = (BotoCoreError, ClientError, Boto3Error)


@final
class RemoteBlobStorage(S3Storage):
    """S3 storage backend for remote file bytes.

    Extends django-storages S3Storage with permanent object URLs.
    ``url()`` returns a presigned URL when querystring auth is on, and
    such a URL expires.
    """

    def object_url(self, name: str) -> str:
        """Build the URL of an object without signature.

        Args:
            name: Key of the object.

        Returns:
            Object URL that does not expire.
        """
        return urlsplit(self.url(name))._replace(query='').geturl()


class StorageBackend(abc.ABC):
    """Places and removes the raw bytes of file records."""

    kind: ClassVar[str]

    @abc.abstractmethod
    def place(
        self,
        owner_id: int,
        content: DjangoFile,
        original_name: str,
    ) -> Locator:
        """Store bytes for the owner and return where they went.

        Args:
            owner_id: ID of the owning user.
            content: Uploaded bytes.
            original_name: Filename as uploaded by the client.

        Returns:
            Locator of the stored bytes.
        """

    @abc.abstractmethod
    def remove(self, locator: Locator) -> None:
        """Remove stored bytes. Removing missing bytes is not an error.

        Args:
            locator: Locator returned by ``place``.

        Raises:
            BackendCleanupFailedError: If the bytes could not be removed.
        """

    def discard(self, locator: Locator) -> bool:
        """Remove stored bytes, tolerating failure.

        Used on delete and when compensating a failed metadata write.
        A failure leaves an orphaned object behind, which is logged.

        Args:
            locator: Locator returned by ``place``.

        Returns:
            True if the bytes are gone, False if removal failed.
        """
        try:
            self.remove(locator)
        except BackendCleanupFailedError:
            logger.exception('Failed to remove stored bytes (orphaned): %s', locator)
            return False
        return True


@final
class LocalStorageBackend(StorageBackend):
    """Stores bytes under ``DRIVE_UPLOADS_ROOT/{owner_id}/``."""

    kind = LOCAL_KIND

    def __init__(self, storage: FileSystemStorage | None = None) -> None:
        """Initialize the backend.

        Args:
            storage: Filesystem storage to use. Defaults to one rooted at
                ``DRIVE_UPLOADS_ROOT``.
        """
        self._storage = storage or FileSystemStorage(
            location=settings.DRIVE_UPLOADS_ROOT,
        )

    @override
    def place(
        self,
        owner_id: int,
        content: DjangoFile,
        original_name: str,
    ) -> LocalLocator:
        """Write bytes into the owner's directory.

        The owner directory is created on first upload; concurrent first
        uploads do not fail on the already existing directory.

        Args:
            owner_id: ID of the owning user.
            content: Uploaded bytes.
            original_name: Filename as uploaded by the client.

        Returns:
            Locator with the path relative to the uploads root.

        Raises:
            InvalidInputError: If the upload is too large.
            BackendUnavailableError: If the bytes could not be written.
        """
        validate_upload_size(content.size, settings.DRIVE_MAX_UPLOAD_BYTES)
        name = f'{owner_id}/{generate_storage_name(original_name)}'

        try:
            saved_name = self._storage.save(name, content)
        except OSError as exc:
            logger.exception('Failed to write upload to disk: %s', name)
            raise BackendUnavailableError(
                'Could not write file to local storage',
            ) from exc

        logger.info('Stored upload on disk: %s', saved_name)
        return LocalLocator(path=saved_name)

    @override
    def remove(self, locator: Locator) -> None:
        """Delete the file at the locator path, if it is still there.

        Args:
            locator: Local locator.

        Raises:
            BackendCleanupFailedError: If the file could not be deleted.
        """
        path = _local_path_of(locator)
        try:
            self._storage.delete(path)
        except OSError as exc:
            raise BackendCleanupFailedError(
                f'Could not delete local file: {path}',
            ) from exc
        logger.info('Deleted file from disk: %s', path)

    def exists(self, locator: Locator) -> bool:
        """Check whether the bytes are still on disk.

        Args:
            locator: Local locator.

        Returns:
            True if the file exists.
        """
        return self._storage.exists(_local_path_of(locator))

    def absolute_path(self, locator: Locator) -> str:
        """Resolve the locator to an absolute filesystem path.

        Args:
            locator: Local locator.

        Returns:
            Absolute path of the stored file.
        """
        return self._storage.path(_local_path_of(locator))

    def list_stored_paths(self) -> list[str]:
        """List every stored file as a path relative to the uploads root.

        Returns:
            Relative paths, e.g. ``['1/1718000000000-1-a.txt']``.
        """
        if not self._storage.exists(''):
            return []
        stored: list[str] = []
        owner_dirs, _ = self._storage.listdir('')
        for owner_dir in owner_dirs:
            _, filenames = self._storage.listdir(owner_dir)
            stored.extend(f'{owner_dir}/{filename}' for filename in filenames)
        return stored


@final
class RemoteStorageBackend(StorageBackend):
    """Stores bytes in the S3-compatible blob store.

    Objects live under ``{DRIVE_REMOTE_PREFIX}/user-{owner_id}/``.
    """

    kind = REMOTE_KIND

    def __init__(self, storage: RemoteBlobStorage | None = None) -> None:
        """Initialize the backend.

        Args:
            storage: S3 storage to use. Defaults to the ``remote`` entry
                of ``STORAGES``.
        """
        self._storage = storage or storages.create_storage(
            settings.STORAGES['remote'],
        )

    @override
    def place(
        self,
        owner_id: int,
        content: DjangoFile,
        original_name: str,
    ) -> RemoteLocator:
        """Upload bytes into the owner's namespace.

        Extension and size are checked before any network call.

        Args:
            owner_id: ID of the owning user.
            content: Uploaded bytes.
            original_name: Filename as uploaded by the client.

        Returns:
            Locator with the object URL and key.

        Raises:
            InvalidInputError: If the file type or size is not accepted.
            BackendUnavailableError: If the upload failed or timed out.
        """
        validate_extension(
            original_name,
            settings.DRIVE_REMOTE_ALLOWED_EXTENSIONS,
        )
        validate_upload_size(content.size, settings.DRIVE_MAX_UPLOAD_BYTES)
        key = '{prefix}/user-{owner_id}/{name}'.format(
            prefix=settings.DRIVE_REMOTE_PREFIX,
            owner_id=owner_id,
            name=generate_storage_name(original_name),
        )

        try:
            logger.info('Uploading object to blob store: %s', key)
            saved_key = self._storage.save(key, content)
            url = self._storage.object_url(saved_key)
        except _S3_ERRORS as exc:
            logger.exception('Failed to upload object to blob store: %s', key)
            raise BackendUnavailableError(
                'Could not upload file to the blob store',
            ) from exc

        logger.info('Successfully uploaded object: %s', saved_key)
        return RemoteLocator(url=url, remote_id=saved_key)

    @override
    def remove(self, locator: Locator) -> None:
        """Delete the object by key.

        Args:
            locator: Remote locator.

        Raises:
            BackendCleanupFailedError: If the blob store call failed.
        """
        remote_id = _remote_id_of(locator)
        try:
            self._storage.delete(remote_id)
        except _S3_ERRORS as exc:
            raise BackendCleanupFailedError(
                f'Could not delete remote object: {remote_id}',
            ) from exc
        logger.info('Deleted object from blob store: %s', remote_id)

    def attachment_url(self, locator: Locator, filename: str) -> str:
        """Build a URL that makes the browser download the object.

        Args:
            locator: Remote locator.
            filename: Filename suggested to the browser.

        Returns:
            URL forcing ``Content-Disposition: attachment``.
        """
        disposition = content_disposition_header(
            as_attachment=True,
            filename=filename,
        )
        return self._storage.url(
            _remote_id_of(locator),
            parameters={'ResponseContentDisposition': disposition},
        )


def get_backend(kind: str) -> StorageBackend:
    """Get the storage backend servicing the given locator kind.

    Args:
        kind: 'local' or 'remote'.

    Returns:
        Storage backend instance.

    Raises:
        ImproperlyConfigured: If the kind is unknown.
    """
    if kind == LOCAL_KIND:
        return LocalStorageBackend()
    if kind == REMOTE_KIND:
        return RemoteStorageBackend()
    raise ImproperlyConfigured(f'Unknown storage backend: {kind}')


def get_upload_backend() -> StorageBackend:
    """Get the backend configured for new uploads.

    Returns:
        Backend named by ``DRIVE_UPLOAD_BACKEND``.
    """
    return get_backend(settings.DRIVE_UPLOAD_BACKEND)


def get_backend_for(locator: Locator) -> StorageBackend | None:
    """Get the backend that stored the given locator.

    Args:
        locator: Any locator.

    Returns:
        Backend instance, or None for placeholder records.
    """
    if isinstance(locator, EmptyLocator):
        return None
    return get_backend(locator.kind)


def discard_locator(locator: Locator) -> bool:
    """Remove the stored bytes of a locator, tolerating failure.

    Args:
        locator: Any locator.

    Returns:
        True if nothing is left behind, False if removal failed.
    """
    backend = get_backend_for(locator)
    if backend is None:
        return True
    return backend.discard(locator)


def _local_path_of(locator: Locator) -> str:
    if not isinstance(locator, LocalLocator):
        raise TypeError(f'Expected a local locator, got: {locator!r}')
    return locator.path


def _remote_id_of(locator: Locator) -> str:
    if not isinstance(locator, RemoteLocator):
        raise TypeError(f'Expected a remote locator, got: {locator!r}')
    return locator.remote_id

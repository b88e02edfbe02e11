"""Database models for drive app."""

from typing import Final, final, override

from django.conf import settings
from django.db import models

from server.apps.drive.infrastructure.locators import (
    EMPTY_KIND,
    LOCAL_KIND,
    REMOTE_KIND,
    EmptyLocator,
    LocalLocator,
    Locator,
    RemoteLocator,
)
from server.apps.drive.infrastructure.metadata import get_file_extension

# Constants for field max lengths
_NAME_MAX_LENGTH: Final = 255
_MIME_TYPE_MAX_LENGTH: Final = 255
_STORAGE_KIND_MAX_LENGTH: Final = 16
_LOCAL_PATH_MAX_LENGTH: Final = 512
_REMOTE_URL_MAX_LENGTH: Final = 2048
_REMOTE_ID_MAX_LENGTH: Final = 512


@final
class Folder(models.Model):
    """Named container in a user's folder tree.

    A folder without parent is a root folder. Every user has an
    independent forest: a parent always has the same owner, and a
    folder is never its own ancestor.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='folders',
        db_index=True,
    )

    name = models.CharField(max_length=_NAME_MAX_LENGTH)

    # Deleting a folder deletes the whole subtree
    parent = models.ForeignKey(
        'self',
        on_delete=models.CASCADE,
        related_name='children',
        null=True,
        blank=True,
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Folder'  # type: ignore[mutable-override]
        verbose_name_plural = 'Folders'  # type: ignore[mutable-override]
        ordering = ['-created_at', '-id']

        indexes = [
            # Optimize one-level listing queries
            models.Index(
                fields=['user', 'parent'],
                name='folders_user_parent_idx',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user.username}:{self.name}'

    @property
    def is_root(self) -> bool:
        """Whether the folder sits at the top of its owner's tree."""
        return self.parent_id is None


class StorageKind(models.TextChoices):
    """Kinds of storage locator."""

    LOCAL = LOCAL_KIND, 'Local disk'
    REMOTE = REMOTE_KIND, 'Remote blob store'
    NONE = EMPTY_KIND, 'Placeholder'


@final
class File(models.Model):
    """Metadata of an uploaded object.

    The bytes live either on local disk or in the remote blob store.
    ``storage_kind`` says which one, and only the columns of that kind
    are populated (enforced by a check constraint).
    """

    # Owner relationship
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='files',
        db_index=True,
    )

    folder = models.ForeignKey(
        Folder,
        on_delete=models.CASCADE,
        related_name='files',
        null=True,
        blank=True,
    )

    name = models.CharField(
        max_length=_NAME_MAX_LENGTH,
        help_text='Display name, usually the uploaded filename',
    )

    size_bytes = models.BigIntegerField(
        default=0,
        help_text='File size in bytes',
    )

    mime_type = models.CharField(
        max_length=_MIME_TYPE_MAX_LENGTH,
        default='application/octet-stream',
    )

    # Storage locator
    storage_kind = models.CharField(
        max_length=_STORAGE_KIND_MAX_LENGTH,
        choices=StorageKind.choices,
    )

    local_path = models.CharField(
        max_length=_LOCAL_PATH_MAX_LENGTH,
        blank=True,
        default='',
        help_text='Path relative to the uploads root: {user_id}/name',
    )

    remote_url = models.URLField(
        max_length=_REMOTE_URL_MAX_LENGTH,
        blank=True,
        default='',
    )

    remote_id = models.CharField(
        max_length=_REMOTE_ID_MAX_LENGTH,
        blank=True,
        default='',
        help_text='Object key in the remote blob store',
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'File'  # type: ignore[mutable-override]
        verbose_name_plural = 'Files'  # type: ignore[mutable-override]
        ordering = ['-created_at', '-id']

        indexes = [
            # Optimize one-level listing queries
            models.Index(
                fields=['user', 'folder'],
                name='files_user_folder_idx',
            ),
        ]

        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(
                        storage_kind=LOCAL_KIND,
                        remote_url='',
                        remote_id='',
                    ) & ~models.Q(local_path='')
                ) | (
                    models.Q(storage_kind=REMOTE_KIND, local_path='')
                    & ~models.Q(remote_url='')
                    & ~models.Q(remote_id='')
                ) | models.Q(
                    storage_kind=EMPTY_KIND,
                    local_path='',
                    remote_url='',
                    remote_id='',
                ),
                name='files_storage_locator_consistent',
            ),
            models.CheckConstraint(
                condition=models.Q(size_bytes__gte=0),
                name='files_size_bytes_non_negative',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user.username}:{self.name}'

    @property
    def locator(self) -> Locator:
        """Storage locator rebuilt from the persisted columns."""
        if self.storage_kind == StorageKind.LOCAL:
            return LocalLocator(path=self.local_path)
        if self.storage_kind == StorageKind.REMOTE:
            return RemoteLocator(url=self.remote_url, remote_id=self.remote_id)
        return EmptyLocator()

    def set_locator(self, locator: Locator) -> None:
        """Store the locator columns for the given locator.

        Args:
            locator: Locator returned by a storage backend.
        """
        self.storage_kind = locator.kind
        self.local_path = ''
        self.remote_url = ''
        self.remote_id = ''
        if isinstance(locator, LocalLocator):
            self.local_path = locator.path
        elif isinstance(locator, RemoteLocator):
            self.remote_url = locator.url
            self.remote_id = locator.remote_id

    def get_extension(self) -> str:
        """Extract file extension from the display name.

        Example: 'file.PDF' -> 'pdf'

        Returns:
            Extension without dot (lowercase).
        """
        return get_file_extension(self.name)

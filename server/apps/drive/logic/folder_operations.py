"""Business logic for the folder tree."""

import logging
from typing import Final

from django.db import DatabaseError, transaction
from django.db.models import QuerySet

from server.apps.drive.exceptions import (
    InvalidInputError,
    InvalidParentError,
    NotFoundError,
    PersistenceFailureError,
)
from server.apps.drive.infrastructure.storage import discard_locator
from server.apps.drive.logic.ownership import may_access
from server.apps.drive.models import File, Folder

_NAME_MAX_LENGTH: Final = 255
_NEWEST_FIRST: Final = ('-created_at', '-id')

logger = logging.getLogger(__name__)


def get_folder(owner_id: int, folder_id: int) -> Folder:
    """Get a folder owned by the principal.

    Args:
        owner_id: ID of the requesting user.
        folder_id: ID of the folder.

    Returns:
        Folder instance.

    Raises:
        NotFoundError: If the folder is missing or owned by someone else.
    """
    try:
        folder = Folder.objects.get(id=folder_id)
    except Folder.DoesNotExist as exc:
        raise NotFoundError('Folder not found') from exc

    if not may_access(owner_id, folder.user_id):
        logger.warning(
            'User %d requested folder %d owned by someone else',
            owner_id,
            folder_id,
        )
        raise NotFoundError('Folder not found')

    return folder


def resolve_parent(owner_id: int, parent_id: int | None) -> Folder | None:
    """Resolve an optional parent folder for a new or moved entity.

    Args:
        owner_id: ID of the requesting user.
        parent_id: ID of the parent folder, None for the root.

    Returns:
        Parent folder, or None for the root.

    Raises:
        InvalidParentError: If the parent is missing or foreign.
    """
    if parent_id is None:
        return None
    try:
        return get_folder(owner_id, parent_id)
    except NotFoundError as exc:
        raise InvalidParentError(
            f'Parent folder does not exist: {parent_id}',
        ) from exc


def create_folder(
    owner_id: int,
    name: str,
    parent_id: int | None = None,
) -> Folder:
    """Create a folder at the root or inside one of the owner's folders.

    Args:
        owner_id: ID of the owning user.
        name: Folder name (required, non-blank).
        parent_id: ID of the parent folder, None for a root folder.

    Returns:
        Created Folder instance.

    Raises:
        InvalidInputError: If the name is blank or too long.
        InvalidParentError: If the parent is missing or foreign.
        PersistenceFailureError: If the database write failed.
    """
    name = (name or '').strip()
    if not name:
        raise InvalidInputError('Folder name is required')
    if len(name) > _NAME_MAX_LENGTH:
        raise InvalidInputError(
            f'Folder name is longer than {_NAME_MAX_LENGTH} characters',
        )

    parent = resolve_parent(owner_id, parent_id)

    try:
        with transaction.atomic():
            folder = Folder.objects.create(
                user_id=owner_id,
                name=name,
                parent=parent,
            )
    except DatabaseError as exc:
        logger.exception('Failed to create folder %r for user %d', name, owner_id)
        raise PersistenceFailureError('Could not save folder') from exc

    logger.info(
        'Folder created: %s (ID: %d, parent: %s)',
        name,
        folder.id,
        parent_id,
    )
    return folder


def list_children(
    owner_id: int,
    parent_id: int | None = None,
) -> tuple[QuerySet[Folder], QuerySet[File]]:
    """List subfolders and files at exactly one level of the tree.

    Nothing below the given level is included. Both lists are newest
    first, ties broken by ID.

    Args:
        owner_id: ID of the owning user.
        parent_id: ID of the folder to list, None for the root.

    Returns:
        Tuple of (subfolders, files).
    """
    logger.debug('Listing folder %s of user %d', parent_id, owner_id)

    subfolders = Folder.objects.filter(
        user_id=owner_id,
        parent_id=parent_id,
    ).order_by(*_NEWEST_FIRST)
    files = File.objects.filter(
        user_id=owner_id,
        folder_id=parent_id,
    ).order_by(*_NEWEST_FIRST)
    return subfolders, files


def folder_ancestors(folder: Folder) -> list[Folder]:
    """Build the chain of ancestors of a folder.

    Args:
        folder: Folder to start from.

    Returns:
        Ancestors ordered from the root down, excluding the folder itself.
    """
    ancestors: list[Folder] = []
    seen = {folder.id}
    current = folder.parent
    while current is not None and current.id not in seen:
        ancestors.append(current)
        seen.add(current.id)
        current = current.parent
    ancestors.reverse()
    return ancestors


def move_folder(
    owner_id: int,
    folder_id: int,
    new_parent_id: int | None,
) -> Folder:
    """Re-parent a folder within its owner's tree.

    Args:
        owner_id: ID of the requesting user.
        folder_id: ID of the folder to move.
        new_parent_id: ID of the new parent, None to move to the root.

    Returns:
        Updated Folder instance.

    Raises:
        NotFoundError: If the folder is missing or foreign.
        InvalidParentError: If the new parent is missing, foreign, the
            folder itself or one of its descendants.
    """
    folder = get_folder(owner_id, folder_id)
    new_parent = resolve_parent(owner_id, new_parent_id)

    if new_parent is not None:
        lineage = {ancestor.id for ancestor in folder_ancestors(new_parent)}
        if new_parent.id == folder.id or folder.id in lineage:
            raise InvalidParentError(
                'A folder cannot be moved into itself or its descendants',
            )

    folder.parent = new_parent
    try:
        with transaction.atomic():
            folder.save(update_fields=['parent'])
    except DatabaseError as exc:
        logger.exception('Failed to move folder %d', folder_id)
        raise PersistenceFailureError('Could not move folder') from exc

    logger.info('Folder moved: ID=%d -> parent %s', folder_id, new_parent_id)
    return folder


def delete_folder(owner_id: int, folder_id: int) -> Folder:
    """Delete a folder together with everything below it.

    Stored bytes of every file in the subtree are removed first
    (best effort), then the rows go in a single transaction.

    Args:
        owner_id: ID of the requesting user.
        folder_id: ID of the folder to delete.

    Returns:
        The deleted Folder instance (``parent_id`` still set).

    Raises:
        NotFoundError: If the folder is missing or foreign.
        PersistenceFailureError: If the database delete failed.
    """
    folder = get_folder(owner_id, folder_id)
    subtree_ids = _collect_subtree_ids(folder)
    files = File.objects.filter(user_id=owner_id, folder_id__in=subtree_ids)

    logger.info(
        'Deleting folder %d with %d subfolders',
        folder_id,
        len(subtree_ids) - 1,
    )

    orphaned = 0
    for file_instance in files:
        if not discard_locator(file_instance.locator):
            orphaned += 1

    try:
        with transaction.atomic():
            folder.delete()
    except DatabaseError as exc:
        logger.exception('Failed to delete folder from database: ID=%d', folder_id)
        raise PersistenceFailureError('Could not delete folder') from exc

    if orphaned:
        logger.warning(
            'Folder %d deleted, %d stored objects left orphaned',
            folder_id,
            orphaned,
        )
    return folder


def _collect_subtree_ids(folder: Folder) -> list[int]:
    subtree_ids = [folder.id]
    frontier = [folder.id]
    while frontier:
        frontier = list(
            Folder.objects.filter(
                parent_id__in=frontier,
            ).exclude(
                id__in=subtree_ids,
            ).values_list('id', flat=True),
        )
        subtree_ids.extend(frontier)
    return subtree_ids

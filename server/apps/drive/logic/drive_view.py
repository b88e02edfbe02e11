"""Composition of drive listings."""

from dataclasses import dataclass, field

from server.apps.drive.logic.folder_operations import (
    folder_ancestors,
    get_folder,
    list_children,
)
from server.apps.drive.models import File, Folder


@dataclass(frozen=True, slots=True)
class DriveView:
    """One level of a user's drive, ready to be rendered."""

    folder: Folder | None
    subfolders: list[Folder]
    files: list[File]
    ancestors: list[Folder] = field(default_factory=list)


def compose_view(owner_id: int, folder_id: int | None = None) -> DriveView:
    """Assemble the listing of the root or of one folder.

    The folder is resolved and ownership-checked before anything is
    listed.

    Args:
        owner_id: ID of the requesting user.
        folder_id: ID of the folder to show, None for the root.

    Returns:
        DriveView with children newest first.

    Raises:
        NotFoundError: If the folder is missing or foreign.
    """
    folder = None
    ancestors: list[Folder] = []
    if folder_id is not None:
        folder = get_folder(owner_id, folder_id)
        ancestors = folder_ancestors(folder)

    subfolders, files = list_children(owner_id, folder_id)
    return DriveView(
        folder=folder,
        subfolders=list(subfolders),
        files=list(files),
        ancestors=ancestors,
    )

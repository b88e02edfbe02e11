"""Storage locators and download instructions.

A locator says where the bytes of one ``File`` record live. Its kind is
decided when the bytes are placed and is carried verbatim afterwards.
"""

from dataclasses import dataclass, field
from typing import Final

LOCAL_KIND: Final = 'local'
REMOTE_KIND: Final = 'remote'
EMPTY_KIND: Final = 'none'


@dataclass(frozen=True, slots=True)
class LocalLocator:
    """Bytes stored by the local backend.

    ``path`` is relative to the uploads root: ``{owner_id}/{name}``.
    """

    path: str

    kind: str = field(default=LOCAL_KIND, init=False)


@dataclass(frozen=True, slots=True)
class RemoteLocator:
    """Bytes stored by the remote blob store under key ``remote_id``."""

    url: str
    remote_id: str

    kind: str = field(default=REMOTE_KIND, init=False)


@dataclass(frozen=True, slots=True)
class EmptyLocator:
    """Placeholder record with no stored bytes."""

    kind: str = field(default=EMPTY_KIND, init=False)


Locator = LocalLocator | RemoteLocator | EmptyLocator


@dataclass(frozen=True, slots=True)
class RedirectDownload:
    """Client should be redirected to ``url`` to fetch the bytes."""

    url: str


@dataclass(frozen=True, slots=True)
class LocalDownload:
    """Bytes are streamed from ``path`` on the local filesystem."""

    path: str
    filename: str
    mime_type: str


DownloadInstruction = RedirectDownload | LocalDownload

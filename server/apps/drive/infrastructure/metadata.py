"""Metadata helpers for uploaded files."""

import mimetypes
import secrets
import time
from pathlib import Path
from typing import Final

from django.core.exceptions import SuspiciousFileOperation
from django.utils.text import get_valid_filename

from server.apps.drive.exceptions import InvalidInputError

_DEFAULT_MIME_TYPE: Final = 'application/octet-stream'
_RANDOM_SUFFIX_LIMIT: Final = 10**9
_FALLBACK_STEM: Final = 'upload'
# Keeps generated names well below the 255-byte filename limit
_SAFE_NAME_MAX_BYTES: Final = 128
_SUFFIX_MAX_BYTES: Final = 16


def detect_mime_type(filename: str, declared: str | None = None) -> str:
    """Detect MIME type of an upload.

    Prefers the content type declared by the client and falls back to
    guessing from the filename extension.

    Args:
        filename: Filename with extension.
        declared: Content type sent with the upload, if any.

    Returns:
        MIME type string (e.g., 'image/jpeg', 'application/pdf').
        Returns 'application/octet-stream' if type cannot be determined.
    """
    if declared:
        return declared
    mime_type, _ = mimetypes.guess_type(filename)
    if mime_type is None:
        return _DEFAULT_MIME_TYPE
    return mime_type


def get_file_extension(filename: str) -> str:
    """Get file extension from filename.

    Args:
        filename: Filename (e.g., 'document.pdf').

    Returns:
        Extension without dot, lowercase (e.g., 'pdf').
        Returns empty string if no extension.
    """
    extension = Path(filename).suffix
    return extension.lstrip('.').lower()


def generate_storage_name(original_name: str) -> str:
    """Generate a collision-resistant name for stored bytes.

    Example: 'my report.pdf' -> '1718000000000-482913374-my_report.pdf'

    Long names are shortened, keeping the extension.

    Args:
        original_name: Filename as uploaded by the client.

    Returns:
        Name prefixed with a millisecond timestamp and a random number.
    """
    timestamp_ms = time.time_ns() // 1_000_000
    random_part = secrets.randbelow(_RANDOM_SUFFIX_LIMIT)
    try:
        safe_name = get_valid_filename(Path(original_name).name)
    except SuspiciousFileOperation:
        safe_name = _FALLBACK_STEM
    safe_name = _clip_name(safe_name, _SAFE_NAME_MAX_BYTES)
    return f'{timestamp_ms}-{random_part}-{safe_name}'


def validate_upload_size(size_bytes: int, max_bytes: int) -> None:
    """Reject uploads larger than the configured limit.

    Args:
        size_bytes: Size of the upload.
        max_bytes: Maximum accepted size.

    Raises:
        InvalidInputError: If the upload is too large.
    """
    if size_bytes > max_bytes:
        raise InvalidInputError(
            f'File too large: {size_bytes} bytes (limit: {max_bytes})',
        )


def validate_extension(filename: str, allowed: tuple[str, ...]) -> None:
    """Reject filenames whose extension is not in the allow-list.

    Args:
        filename: Filename as uploaded.
        allowed: Lowercase extensions without dot.

    Raises:
        InvalidInputError: If the extension is not allowed.
    """
    extension = get_file_extension(filename)
    if extension not in allowed:
        raise InvalidInputError(
            f'File type not allowed: {extension or "(none)"}',
        )


def _clip_name(name: str, max_bytes: int) -> str:
    if len(name.encode()) <= max_bytes:
        return name
    path = Path(name)
    suffix = path.suffix
    if len(suffix.encode()) > _SUFFIX_MAX_BYTES:
        suffix = ''
    stem = path.stem if suffix else name
    budget = max_bytes - len(suffix.encode())
    # Cutting bytes may split a multibyte character, which is dropped
    clipped = stem.encode()[:budget].decode(errors='ignore')
    return f'{clipped}{suffix}'

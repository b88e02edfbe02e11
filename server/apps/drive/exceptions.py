"""Exceptions for drive app.

Every error the drive operations raise derives from ``DriveError``.
``DriveErrorMiddleware`` maps each class to an HTTP status.
"""


class DriveError(Exception):
    """Base class for drive errors."""

    status_code = 500
    public_message = 'Internal server error'

    def __init__(self, message: str = '') -> None:
        """Initialize DriveError.

        Args:
            message: Human-readable description. Falls back to the
                class-level public message.
        """
        super().__init__(message or self.public_message)


class NotFoundError(DriveError):
    """Entity is absent or owned by someone else.

    The two cases are never distinguished, so callers cannot look
    for other users' entities.
    """

    status_code = 404
    public_message = 'Not found'


class NotFoundOnDiskError(NotFoundError):
    """File record exists but its bytes are gone from local storage."""

    public_message = 'File not found on server'


class InvalidInputError(DriveError):
    """Validation failure, malformed identifier or missing field."""

    status_code = 400
    public_message = 'Invalid input'


class InvalidParentError(InvalidInputError):
    """Parent folder is missing, foreign or would create a cycle."""

    public_message = 'Invalid parent folder'


class ConflictError(DriveError):
    """Unique constraint violation, e.g. a taken username."""

    status_code = 409
    public_message = 'Conflict'


class BackendUnavailableError(DriveError):
    """Remote storage call failed or timed out."""

    status_code = 503
    public_message = 'Storage backend unavailable'


class BackendCleanupFailedError(DriveError):
    """Storage object could not be removed. Logged, never surfaced."""

    public_message = 'Storage cleanup failed'


class PersistenceFailureError(DriveError):
    """Underlying database write failed."""

    status_code = 500
    public_message = 'Internal server error'

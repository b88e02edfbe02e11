"""Ownership guard shared by folder and file operations."""


def may_access(principal_id: int, owner_id: int) -> bool:
    """Decide whether the principal may read, change or delete an entity.

    Callers report a failed check as ``NotFoundError``, never as a
    distinct "forbidden" outcome.

    Args:
        principal_id: ID of the user issuing the request.
        owner_id: ID of the entity's owner.

    Returns:
        True if the principal owns the entity.
    """
    return principal_id == owner_id

"""Business logic layer for drive app.

This package contains all business logic of the drive:
- Ownership checks shared by every operation
- Folder tree management (create, list, move, delete)
- File records and their stored bytes (create, download, delete)
- Drive listings composed for the views

Operations take the principal's user ID explicitly; only the views
read the authenticated user from the request.
"""

"""Infrastructure layer for drive app.

This package contains integrations with external systems:
- Storage backends for file bytes (local disk, S3/MinIO/R2)
- Storage locators and download instructions
- Upload metadata (MIME type, generated names, upload limits)

Keep infrastructure concerns separate from business logic.
"""

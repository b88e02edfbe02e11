"""Drive settings: upload backend selection and upload limits."""

from typing import Final

from server.settings.components import BASE_DIR, config

# Backend used for new uploads: 'local' or 'remote'
DRIVE_UPLOAD_BACKEND = config('DRIVE_UPLOAD_BACKEND', default='local')

# Root directory of the local backend, one subdirectory per owner
DRIVE_UPLOADS_ROOT = config(
    'DRIVE_UPLOADS_ROOT',
    default=str(BASE_DIR.joinpath('uploads')),
)

# 10 MiB upload limit
DRIVE_MAX_UPLOAD_BYTES: Final = 10 * 1024 * 1024

# Extensions accepted by the remote blob store
DRIVE_REMOTE_ALLOWED_EXTENSIONS: Final = (
    'jpg',
    'jpeg',
    'png',
    'gif',
    'pdf',
    'doc',
    'docx',
    'txt',
    'zip',
)

# Key prefix of the owner-scoped namespaces in the bucket
DRIVE_REMOTE_PREFIX = config('DRIVE_REMOTE_PREFIX', default='file-uploader')


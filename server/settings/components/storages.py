"""Django storage configuration for the remote blob store.

The remote backend is any S3-compatible service (AWS S3, MinIO,
Cloudflare R2) reached through django-storages. The local backend does
not go through ``STORAGES``: it is built from ``DRIVE_UPLOADS_ROOT``.
"""

from typing import Any, Final

from botocore.config import Config

from server.settings.components import config

# Timeouts are bounded and retries are disabled: a failed upload is
# reported to the caller, never retried internally.
_CLIENT_CONFIG: Final = Config(
    connect_timeout=config(
        'DRIVE_REMOTE_CONNECT_TIMEOUT',
        cast=float,
        default=5.0,
    ),
    read_timeout=config(
        'DRIVE_REMOTE_READ_TIMEOUT',
        cast=float,
        default=30.0,
    ),
    retries={'total_max_attempts': 1},
    s3={'addressing_style': 'auto'},
)

STORAGES: Final[dict[str, dict[str, Any]]] = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'remote': {
        'BACKEND': 'server.apps.drive.infrastructure.storage.RemoteBlobStorage',
        'OPTIONS': {
            'bucket_name': config(
                'AWS_STORAGE_BUCKET_NAME',
                default='file-drive',
            ),
            'access_key': config('AWS_ACCESS_KEY_ID', default=None),
            'secret_key': config('AWS_SECRET_ACCESS_KEY', default=None),
            'endpoint_url': config(
                'AWS_S3_ENDPOINT_URL',
                default=None,
            ),
            'region_name': config(
                'AWS_S3_REGION_NAME',
                default='us-east-1',
            ),
            'querystring_auth': config(
                'AWS_QUERYSTRING_AUTH',
                cast=bool,
                default=True,
            ),
            'file_overwrite': False,  # Prevent accidental overwrites
            'default_acl': None,  # Inherit bucket ACL
            'client_config': _CLIENT_CONFIG,
        },
    },
    'staticfiles': {
        # Keep static files separate from user files
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}

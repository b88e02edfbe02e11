"""Integration tests for the remote backend against MinIO.

These tests verify that the remote storage backend works with a real
S3-compatible endpoint, e.g. MinIO running in Docker Compose. They are
skipped unless ``MINIO_ENDPOINT`` is set.
"""
import os
from typing import Final

import boto3
import pytest
from botocore.client import BaseClient
from botocore.exceptions import ClientError
from django.core.files.base import ContentFile

from server.apps.drive.infrastructure.storage import RemoteStorageBackend

_TEST_BUCKET: Final = 'file-drive'
_TEST_FILE_CONTENT: Final = b'Hello from MinIO integration test!'
_TEST_OWNER_ID: Final = 4242

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        'MINIO_ENDPOINT' not in os.environ,
        reason='MINIO_ENDPOINT is not set',
    ),
]


@pytest.fixture
def s3_client() -> BaseClient:
    """Create S3 client for MinIO.

    Returns:
        Configured boto3 S3 client for MinIO.
    """
    return boto3.client(
        's3',
        endpoint_url=os.environ['MINIO_ENDPOINT'],
        aws_access_key_id=os.getenv('MINIO_ROOT_USER', 'minioadmin'),
        aws_secret_access_key=os.getenv('MINIO_ROOT_PASSWORD', 'minioadmin'),
        region_name='us-east-1',
    )


@pytest.fixture
def test_bucket(s3_client: BaseClient) -> str:
    """Ensure test bucket exists.

    Args:
        s3_client: boto3 S3 client.

    Returns:
        Name of the test bucket.
    """
    try:
        s3_client.head_bucket(Bucket=_TEST_BUCKET)
    except ClientError:
        s3_client.create_bucket(Bucket=_TEST_BUCKET)

    return _TEST_BUCKET


@pytest.fixture
def backend(settings, test_bucket: str) -> RemoteStorageBackend:
    """Remote backend pointed at MinIO.

    Args:
        settings: pytest-django settings fixture.
        test_bucket: Name of the test bucket.

    Returns:
        RemoteStorageBackend using the MinIO endpoint.
    """
    options = settings.STORAGES['remote']['OPTIONS']
    settings.STORAGES = {
        **settings.STORAGES,
        'remote': {
            **settings.STORAGES['remote'],
            'OPTIONS': {
                **options,
                'bucket_name': test_bucket,
                'endpoint_url': os.environ['MINIO_ENDPOINT'],
                'access_key': os.getenv('MINIO_ROOT_USER', 'minioadmin'),
                'secret_key': os.getenv('MINIO_ROOT_PASSWORD', 'minioadmin'),
            },
        },
    }
    return RemoteStorageBackend()


def test_place_object(backend: RemoteStorageBackend, s3_client: BaseClient) -> None:
    """Test uploading an object through the backend.

    Args:
        backend: Remote backend.
        s3_client: boto3 S3 client.
    """
    locator = backend.place(
        _TEST_OWNER_ID,
        ContentFile(_TEST_FILE_CONTENT),
        'integration.txt',
    )

    response = s3_client.get_object(Bucket=_TEST_BUCKET, Key=locator.remote_id)
    assert response['Body'].read() == _TEST_FILE_CONTENT
    assert locator.remote_id.startswith(f'file-uploader/user-{_TEST_OWNER_ID}/')

    backend.remove(locator)


def test_remove_object(backend: RemoteStorageBackend, s3_client: BaseClient) -> None:
    """Test deleting an object through the backend.

    Args:
        backend: Remote backend.
        s3_client: boto3 S3 client.
    """
    locator = backend.place(
        _TEST_OWNER_ID,
        ContentFile(_TEST_FILE_CONTENT),
        'integration.txt',
    )

    backend.remove(locator)

    # Verify object is deleted
    with pytest.raises(ClientError) as exc_info:
        s3_client.head_object(Bucket=_TEST_BUCKET, Key=locator.remote_id)

    assert exc_info.value.response['Error']['Code'] == '404'

"""Shared fixtures for drive app tests."""

import boto3
import pytest
from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from moto import mock_aws

User = get_user_model()


@pytest.fixture
def user(db):
    """Create test user.

    Returns:
        User instance for testing.
    """
    return User.objects.create_user(
        username='testuser',
        password='testpass123',
        email='test@example.com',
    )


@pytest.fixture
def other_user(db):
    """Create second test user for isolation tests.

    Returns:
        Second user instance.
    """
    return User.objects.create_user(
        username='otheruser',
        password='testpass123',
        email='other@example.com',
    )


@pytest.fixture
def uploads_root(settings, tmp_path):
    """Point the local backend at a temporary directory.

    Returns:
        Path of the uploads root.
    """
    root = tmp_path / 'uploads'
    settings.DRIVE_UPLOADS_ROOT = str(root)
    settings.DRIVE_UPLOAD_BACKEND = 'local'
    return root


@pytest.fixture
def mock_s3():
    """Mock S3 service with file-drive bucket.

    Yields:
        boto3 S3 resource with file-drive bucket created.
    """
    with mock_aws():
        # Create S3 resource
        conn = boto3.resource('s3', region_name='us-east-1')

        # Create bucket
        conn.create_bucket(Bucket='file-drive')

        yield conn


@pytest.fixture
def remote_uploads(settings, mock_s3):
    """Send new uploads to the mocked blob store.

    Returns:
        boto3 S3 resource with file-drive bucket created.
    """
    settings.DRIVE_UPLOAD_BACKEND = 'remote'
    return mock_s3


@pytest.fixture
def sample_upload():
    """Sample upload as received from a multipart form.

    Returns:
        SimpleUploadedFile with test data.
    """
    return SimpleUploadedFile(
        'a.txt',
        b'test file content',
        content_type='text/plain',
    )

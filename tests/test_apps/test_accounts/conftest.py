"""Shared fixtures for accounts app tests."""

import pytest
from django.contrib.auth import get_user_model

User = get_user_model()


@pytest.fixture
def user(db):
    """Create an existing account.

    Returns:
        User instance for testing.
    """
    return User.objects.create_user(
        username='alice',
        password='secret123',
        first_name='Alice',
        last_name='Smith',
    )


@pytest.fixture
def registration_data():
    """Valid sign-up form data.

    Returns:
        Dict of posted fields.
    """
    return {
        'first_name': 'Bob',
        'last_name': 'Jones',
        'username': 'bob',
        'password': 'hunter2',
        'passwordConfirmation': 'hunter2',
    }

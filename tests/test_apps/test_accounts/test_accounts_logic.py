"""Tests for registration and authentication logic."""

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.test import RequestFactory

from server.apps.accounts.logic.authentication import (
    AuthFailure,
    authenticate_credentials,
    current_principal,
)
from server.apps.accounts.logic.registration import register_user
from server.apps.drive.exceptions import ConflictError

User = get_user_model()


@pytest.mark.django_db
def test_register_user():
    """Test accounts are created with a hashed password."""
    user = register_user('Bob', 'Jones', 'bob', 'hunter2')

    assert user.username == 'bob'
    assert user.first_name == 'Bob'
    assert user.last_name == 'Jones'
    assert user.password != 'hunter2'
    assert user.check_password('hunter2')


@pytest.mark.django_db
def test_register_taken_username(user):
    """Test a taken username leaves the existing account untouched."""
    password_hash = user.password

    with pytest.raises(ConflictError, match='Username is already taken.'):
        register_user('Mallory', 'Evil', 'alice', 'other-password')

    user.refresh_from_db()
    assert User.objects.filter(username='alice').count() == 1
    assert user.first_name == 'Alice'
    assert user.password == password_hash


@pytest.mark.django_db
def test_authenticate_credentials(user):
    """Test valid credentials return the user."""
    request = RequestFactory().post('/log-in')

    assert authenticate_credentials(request, 'alice', 'secret123') == user


@pytest.mark.django_db
@pytest.mark.parametrize(('username', 'password'), [
    ('alice', 'wrong-password'),
    ('nobody', 'secret123'),
])
def test_authenticate_credentials_failure(user, username, password):
    """Test unknown users and wrong passwords fail the same way."""
    request = RequestFactory().post('/log-in')

    outcome = authenticate_credentials(request, username, password)

    assert outcome == AuthFailure()


@pytest.mark.django_db
def test_current_principal(user):
    """Test the principal is the session user or None."""
    request = RequestFactory().get('/')
    request.user = AnonymousUser()
    assert current_principal(request) is None

    request.user = user
    assert current_principal(request) == user

"""Business logic for user registration."""

import logging

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AbstractUser
from django.db import DatabaseError, IntegrityError, transaction

from server.apps.drive.exceptions import (
    ConflictError,
    PersistenceFailureError,
)

logger = logging.getLogger(__name__)

_USERNAME_TAKEN = 'Username is already taken.'


def register_user(
    first_name: str,
    last_name: str,
    username: str,
    password: str,
) -> AbstractUser:
    """Create a user account with a hashed password.

    The input is expected to be validated by ``RegistrationForm``.
    An existing account with the same username is never touched.

    Args:
        first_name: First name.
        last_name: Last name.
        username: Unique username.
        password: Raw password, stored hashed.

    Returns:
        Created user.

    Raises:
        ConflictError: If the username is taken.
        PersistenceFailureError: If the database write failed.
    """
    user_model = get_user_model()
    if user_model.objects.filter(username=username).exists():
        logger.info('Registration rejected, username taken: %s', username)
        raise ConflictError(_USERNAME_TAKEN)

    try:
        with transaction.atomic():
            user = user_model.objects.create_user(
                username=username,
                password=password,
                first_name=first_name,
                last_name=last_name,
            )
    except IntegrityError as exc:
        # Lost a race with a concurrent registration
        logger.info('Registration rejected, username taken: %s', username)
        raise ConflictError(_USERNAME_TAKEN) from exc
    except DatabaseError as exc:
        logger.exception('Failed to register user: %s', username)
        raise PersistenceFailureError('Registration failed') from exc

    logger.info('User registered: %s (ID: %d)', username, user.id)
    return user

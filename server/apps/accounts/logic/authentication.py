"""Credential checks and session principal lookup."""

import logging
from dataclasses import dataclass

from django.contrib.auth import authenticate
from django.contrib.auth.models import AbstractBaseUser
from django.http import HttpRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AuthFailure:
    """Outcome of a rejected log-in attempt."""

    message: str = 'Invalid username or password'


def authenticate_credentials(
    request: HttpRequest,
    username: str,
    password: str,
) -> AbstractBaseUser | AuthFailure:
    """Check a username and password pair.

    Unknown usernames and wrong passwords give the same failure.

    Args:
        request: Current HTTP request.
        username: Submitted username.
        password: Submitted raw password.

    Returns:
        Authenticated user, or AuthFailure.
    """
    user = authenticate(request, username=username, password=password)
    if user is None:
        logger.info('Failed log-in attempt for username: %s', username)
        return AuthFailure()
    return user


def current_principal(request: HttpRequest) -> AbstractBaseUser | None:
    """Get the user bound to the session.

    Args:
        request: Current HTTP request.

    Returns:
        Authenticated user, or None for anonymous requests.
    """
    if request.user.is_authenticated:
        return request.user
    return None

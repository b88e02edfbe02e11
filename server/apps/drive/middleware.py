"""Middleware for request logging and drive error responses."""

import logging
from collections.abc import Callable
from typing import final

from django.http import HttpRequest, HttpResponse

from server.apps.drive.exceptions import DriveError

logger = logging.getLogger(__name__)

_GetResponse = Callable[[HttpRequest], HttpResponse]


@final
class RequestLoggingMiddleware:
    """Log method and path of every request."""

    def __init__(self, get_response: _GetResponse) -> None:
        """Initialize the middleware.

        Args:
            get_response: Next handler in the chain.
        """
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Log the request and pass it on."""
        logger.info('%s %s', request.method, request.path)
        return self.get_response(request)


@final
class DriveErrorMiddleware:
    """Turn drive errors raised by views into plain text responses.

    Client errors carry their message. Server errors are logged with
    details and answered with a generic message only.
    """

    def __init__(self, get_response: _GetResponse) -> None:
        """Initialize the middleware.

        Args:
            get_response: Next handler in the chain.
        """
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Pass the request on."""
        return self.get_response(request)

    def process_exception(
        self,
        request: HttpRequest,
        exception: Exception,
    ) -> HttpResponse | None:
        """Build the response for a drive error.

        Args:
            request: HTTP request that failed.
            exception: Exception raised by the view.

        Returns:
            Response for drive errors, None to let Django handle others.
        """
        if not isinstance(exception, DriveError):
            return None

        if exception.status_code >= 500:
            logger.error(
                'Request failed: %s %s',
                request.method,
                request.path,
                exc_info=exception,
            )
            message = exception.public_message
        else:
            logger.info(
                'Request rejected (%d): %s %s: %s',
                exception.status_code,
                request.method,
                request.path,
                exception,
            )
            message = str(exception)

        return HttpResponse(
            message,
            status=exception.status_code,
            content_type='text/plain; charset=utf-8',
        )

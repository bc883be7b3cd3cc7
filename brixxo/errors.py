"""Error taxonomy for calls against the marketplace backend.

Every failure is caught where the call is made and turned into a single
user-facing message; nothing here is retried.
"""
from __future__ import annotations

import logging

from flask import flash, jsonify

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """A backend call failed.

    ``body_message`` holds the ``message`` field of the error body when the
    server sent one; ``str(exc)`` always has something readable.
    """

    def __init__(self, message: str, status: int | None = None, body_message: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.body_message = body_message


class TransportError(BackendError):
    """The request never produced an HTTP response."""


class ValidationFailed(BackendError):
    """The server rejected the request (4xx)."""


class NotFound(BackendError):
    """The requested record does not exist (404)."""


class AccessDenied(BackendError):
    """The signed-in user may not perform this action."""

    def __init__(self, message: str = 'Access Denied', status: int | None = 403, body_message: str | None = None) -> None:
        super().__init__(message, status, body_message)


def error_from_response(resp) -> BackendError:
    """Map a non-2xx ``requests.Response`` onto the taxonomy."""
    try:
        body = resp.json()
    except ValueError:
        body = {}
    body_message = body.get('message') if isinstance(body, dict) else None
    message = body_message or f'HTTP error! status: {resp.status_code}'
    if resp.status_code == 404:
        cls = NotFound
    elif resp.status_code in (401, 403):
        cls = AccessDenied
    elif 400 <= resp.status_code < 500:
        cls = ValidationFailed
    else:
        cls = BackendError
    return cls(message, status=resp.status_code, body_message=body_message)


def user_message(exc: BackendError, fallback: str) -> str:
    return exc.body_message or fallback


def error_response(exc: BackendError, fallback: str, category: str = 'danger'):
    """Flash the user-facing message and build the JSON failure reply."""
    message = user_message(exc, fallback)
    logger.warning('%s (%s)', message, exc)
    flash(message, category)
    if isinstance(exc, TransportError) or not exc.status or not 400 <= exc.status < 500:
        status = 502
    else:
        status = exc.status
    return jsonify(success=False, message=message), status

"""
Error taxonomy shared by services and routes.

Services raise these; the handlers registered in ``weekgrid.main`` turn them
into HTTP responses so routes stay thin.
"""
from __future__ import annotations

from fastapi import status


class WeekgridError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message


class InputError(WeekgridError):
    """Malformed date, hour, status or body shape."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid input"


class AuthError(WeekgridError):
    """Missing or invalid signed init data."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid Telegram init data"


class AuthorizationDenied(WeekgridError):
    """Verified identity that is not on the allow-list.

    Rendered as a bodiless 404 so it cannot be told apart from an unknown route.
    """

    status_code = status.HTTP_404_NOT_FOUND
    message = "Not Found"


class StorageError(WeekgridError):
    """Any failure of the persistence layer. The message is never sent to clients."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

"""Domain errors mapped to HTTP responses by the global error handlers."""

from __future__ import annotations


class AppError(Exception):
    """Base class for errors whose message is safe to show to the client."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(AppError):
    """An id-based lookup found nothing."""

    status_code = 404


class ConflictError(AppError):
    """The request conflicts with current state (e.g. a session is already running)."""

    status_code = 400

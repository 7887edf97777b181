"""Domain exceptions raised by services and mapped to HTTP responses in main."""

from fastapi import status


class WorkhubError(Exception):
    """Base exception for Workhub. `status_code` drives the HTTP mapping."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "An error occurred") -> None:
        self.message = message
        super().__init__(message)


class ConflictError(WorkhubError):
    """Raised when a unique key (e.g. email) is already taken."""

    status_code = status.HTTP_409_CONFLICT


class NotFoundError(WorkhubError):
    """Raised when a user, workspace, membership or token does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class TokenExpiredError(NotFoundError):
    """Raised when a single-use token is redeemed after its expiration time."""


class UnauthorizedError(WorkhubError):
    """Raised for missing/invalid bearer credentials and insufficient workspace role."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(WorkhubError):
    """Raised for incorrect credentials, inactive users and route role checks."""

    status_code = status.HTTP_403_FORBIDDEN


class ServiceUnavailableError(WorkhubError):
    """Raised when the database, mail server or message broker cannot be reached."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

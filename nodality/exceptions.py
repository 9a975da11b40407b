"""Exceptions raised by the data-access and auth layers."""

from typing import Optional


class NodalityError(Exception):
    """Base exception for repository, service and auth failures."""

    def __init__(self, message: str, error_code: str = "NODALITY_ERROR", original_error: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.original_error = original_error


class RepositoryError(NodalityError):
    """A database operation failed."""

    def __init__(self, message: str = "Repository operation failed", original_error: Optional[Exception] = None):
        super().__init__(message, "REPOSITORY_ERROR", original_error)


class NotFoundError(RepositoryError):
    """Requested document does not exist."""

    def __init__(self, message: str = "Resource not found", original_error: Optional[Exception] = None):
        NodalityError.__init__(self, message, "NOT_FOUND", original_error)


class AuthError(NodalityError):
    """Sign-up, sign-in, sign-out or password reset failed."""

    def __init__(self, message: str = "Authentication failed", original_error: Optional[Exception] = None):
        super().__init__(message, "AUTH_ERROR", original_error)

"""
Application error taxonomy.

Services raise these; ``middleware.error_handler`` turns them into
``{"success": false, "message": ...}`` responses with the matching status.
"""


class AppError(Exception):
    def __init__(self, message: str, *, status_code: int = 400) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationError(AppError):
    def __init__(self, message: str = "Validation error") -> None:
        super().__init__(message, status_code=400)


class InvalidOperationError(ValidationError):
    """A well-formed request asking for something the domain forbids, e.g. messaging yourself."""


class UnauthenticatedError(AppError):
    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, status_code=401)


class ForbiddenError(AppError):
    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message, status_code=403)


class NotFoundError(AppError):
    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, status_code=404)


class StoreUnavailableError(AppError):
    """The message store timed out or could not be reached. Safe to retry."""

    def __init__(self, message: str = "Message store unavailable, please retry") -> None:
        super().__init__(message, status_code=500)

"""
Application error taxonomy.

Services raise these; main.py turns them into `{"message", "code"}` JSON
bodies with the matching HTTP status.
"""
from starlette import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code: str = "SERVER_ERROR"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        return {"message": self.message, "code": self.code}


class ValidationError(AppError):
    """Malformed or missing input."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "VALIDATION_ERROR"


class AuthError(AppError):
    """No credential, or the credential could not be verified."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_code = "UNAUTHORIZED"


class ForbiddenError(AppError):
    """Authenticated, but not allowed to touch this resource."""
    status_code = status.HTTP_403_FORBIDDEN
    default_code = "FORBIDDEN"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_code = "NOT_FOUND"


class StorageError(AppError):
    """The database call itself failed. Never retried."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code = "STORAGE_ERROR"

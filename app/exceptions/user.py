# ruff: noqa: D107
"""User and authentication exceptions."""

from .base import BadRequestError, ConflictError, NotFoundError, UnauthorizedError


class UserAlreadyExistsError(ConflictError):
    """Raised when the email or username is already registered."""

    def __init__(self, message: str = "User already exists", field: str | None = None):
        super().__init__(
            message=message,
            error_code="USER_ALREADY_EXISTS",
            details={"field": field} if field else None,
        )


class UserNotFoundError(NotFoundError):
    """Raised when a user record cannot be resolved."""

    def __init__(self, message: str = "User not found"):
        super().__init__(message=message, error_code="USER_NOT_FOUND")


class InvalidCredentialsError(UnauthorizedError):
    """Raised for every credential login failure, whatever the cause."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message=message, error_code="INVALID_CREDENTIALS")


class InvalidTokenError(BadRequestError):
    """Raised when a verification or reset token is unknown or expired."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message=message)

"""
Error taxonomy shared by every API route.

Each failure kind maps to a fixed HTTP status and a stable machine code.
User-visible messages must be clear and must never carry internal detail.
"""
from typing import Any, Optional


class AppErrors:
    """Centralized user-facing error messages."""

    UNEXPECTED = "An unexpected error occurred"

    UNAUTHORIZED = "Unauthorized access"

    FORBIDDEN = "Access forbidden"

    RATE_LIMITED = "Too many requests. Please try again later."

    INVALID_SCHEMA = "Invalid schema data"

    INVALID_JSON = "Request body must be valid JSON"

    INVALID_SCHEMA_ID = "Invalid schema ID"

    NOT_DYNAMIC = "This is not a dynamic schema"

    DATABASE = "Failed to access schema storage. Please try again."


class AppError(Exception):
    """Base class for every classified failure."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(AppError):
    """Payload failed shape or field checks. `details` is a list of violations."""

    status_code = 400
    code = "VALIDATION_ERROR"


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: Optional[str] = None):
        if identifier:
            message = f"{resource} with ID '{identifier}' not found"
        else:
            message = f"{resource} not found"
        super().__init__(message)


class UnauthorizedError(AppError):
    status_code = 401
    code = "UNAUTHORIZED"

    def __init__(self, message: str = AppErrors.UNAUTHORIZED):
        super().__init__(message)


class ForbiddenError(AppError):
    status_code = 403
    code = "FORBIDDEN"

    def __init__(self, message: str = AppErrors.FORBIDDEN):
        super().__init__(message)


class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT"


class RateLimitError(AppError):
    status_code = 429
    code = "RATE_LIMIT_EXCEEDED"

    def __init__(self, message: str = AppErrors.RATE_LIMITED, retry_after: Optional[int] = None):
        super().__init__(message)
        self.retry_after = retry_after


class DatabaseError(AppError):
    """Store operation failed. The driver error is chained as __cause__."""

    status_code = 500
    code = "DATABASE_ERROR"

    def __init__(self, message: str = AppErrors.DATABASE):
        super().__init__(message)


class ConfigurationError(AppError):
    status_code = 500
    code = "CONFIGURATION_ERROR"


class SchemaError(AppError):
    """Business-rule violation on an otherwise well-formed request."""

    status_code = 400
    code = "SCHEMA_ERROR"


def is_app_error(error: BaseException) -> bool:
    return isinstance(error, AppError)


def classify_error(error: BaseException) -> AppError:
    """Map any exception onto exactly one taxonomy kind.

    Unclassified errors become a generic AppError whose message is the fixed
    UNEXPECTED phrase; the original exception is chained for logging only.
    """
    if isinstance(error, AppError):
        return error
    wrapped = AppError(AppErrors.UNEXPECTED)
    wrapped.__cause__ = error
    return wrapped


def get_error_message(error: BaseException) -> str:
    if isinstance(error, AppError):
        return error.message
    return AppErrors.UNEXPECTED


def get_error_status(error: BaseException) -> int:
    if isinstance(error, AppError):
        return error.status_code
    return 500


def get_error_code(error: BaseException) -> str:
    if isinstance(error, AppError):
        return error.code
    return "INTERNAL_ERROR"


def error_body(error: AppError) -> dict:
    """Build the uniform failure envelope for an already classified error."""
    body = {
        "success": False,
        "error": error.message,
        "code": error.code,
    }
    if error.details is not None:
        body["details"] = error.details
    if isinstance(error, RateLimitError) and error.retry_after is not None:
        body["retryAfter"] = error.retry_after
    return body

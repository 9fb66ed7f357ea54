"""Application Errors and their JSON Envelope"""

import secrets
import string
import time
from typing import Any, Dict, Optional

from fastapi import status

from app.config import settings
from app.utils.time import get_utc_now


class ErrorCodes:
    """Stable machine-readable error codes returned in the `code` field"""
    # Authentication
    UNAUTHORIZED = "AUTH_001"
    FORBIDDEN = "AUTH_002"
    INVALID_CREDENTIALS = "AUTH_003"
    SESSION_EXPIRED = "AUTH_004"

    # Resources
    NOT_FOUND = "RESOURCE_001"
    ALREADY_EXISTS = "RESOURCE_002"
    CONFLICT = "RESOURCE_003"

    # Input
    VALIDATION_ERROR = "INPUT_001"
    INVALID_FORMAT = "INPUT_002"
    MISSING_REQUIRED = "INPUT_003"

    # Database
    DATABASE_ERROR = "DB_001"
    CONNECTION_ERROR = "DB_002"
    QUERY_ERROR = "DB_003"

    # Server
    INTERNAL_ERROR = "SERVER_001"
    RATE_LIMITED = "SERVER_002"


_ERROR_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_error_id() -> str:
    """Error reference shown to clients and written to logs, e.g. ERR_1700000000000_k3j9x2a"""
    suffix = "".join(secrets.choice(_ERROR_ID_ALPHABET) for _ in range(7))
    return f"ERR_{int(time.time() * 1000)}_{suffix}"


class AppError(Exception):
    """
    Base application error carrying an HTTP status and an error code.

    Rendered by `app_error_handler` in `app.core.error_handlers` as:
        {
            "error": "Forbidden",
            "code": "AUTH_002",
            "errorId": "ERR_...",
            "timestamp": "2024-01-28T10:00:00Z"
        }
    `context` is only included in development.
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.context = context
        self.timestamp = get_utc_now().isoformat(timespec="milliseconds") + "Z"
        self.error_id = generate_error_id()

    @property
    def is_server_error(self) -> bool:
        return self.status_code >= 500

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "error": self.message,
            "code": self.code,
            "errorId": self.error_id,
            "timestamp": self.timestamp,
        }
        if settings.is_development and self.context:
            body["context"] = self.context
        return body


class UnauthenticatedError(AppError):
    """No resolved caller for the request"""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, ErrorCodes.UNAUTHORIZED, status.HTTP_401_UNAUTHORIZED)


class ForbiddenError(AppError):
    """Caller is known but lacks the required capability"""

    def __init__(self, message: str = "Forbidden", context: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCodes.FORBIDDEN, status.HTTP_403_FORBIDDEN, context)


class NotFoundError(AppError):
    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found", ErrorCodes.NOT_FOUND, status.HTTP_404_NOT_FOUND)


class BadRequestError(AppError):
    """Request is well-formed but asks for something not allowed"""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCodes.VALIDATION_ERROR, status.HTTP_400_BAD_REQUEST, context)


class ConflictError(AppError):
    def __init__(self, message: str):
        super().__init__(message, ErrorCodes.ALREADY_EXISTS, status.HTTP_409_CONFLICT)


class StoreFailure(AppError):
    """
    A query against the data store failed.

    The message is generic on purpose; the underlying exception is chained
    (`raise StoreFailure(...) from exc`) and logged server-side only.
    """

    def __init__(
        self,
        message: str = "An error occurred while querying the database",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, ErrorCodes.DATABASE_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR, context)


class InternalError(AppError):
    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(message, ErrorCodes.INTERNAL_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)

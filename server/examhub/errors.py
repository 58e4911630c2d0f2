"""
Error kinds raised by command/query handlers.

Handlers raise one of the ExamHubError subclasses; the API layer maps the
carried ErrorKind to an HTTP status without looking at the message text.
"""
import enum
from typing import Optional


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    UNAUTHENTICATED = "unauthenticated"
    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


HTTP_STATUS = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.ACCESS_DENIED: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INTERNAL: 500,
}

DEFAULT_MESSAGES = {
    ErrorKind.VALIDATION: "Validation error",
    ErrorKind.UNAUTHENTICATED: "Invalid or expired token",
    ErrorKind.ACCESS_DENIED: "Access denied",
    ErrorKind.NOT_FOUND: "Not found",
    ErrorKind.INTERNAL: "Internal error",
}


class ExamHubError(Exception):
    """Base error carrying an explicit kind."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, detail: str, message: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.message = message or DEFAULT_MESSAGES[self.kind]

    @property
    def status_code(self) -> int:
        return HTTP_STATUS[self.kind]


class ValidationFailed(ExamHubError):
    kind = ErrorKind.VALIDATION


class Unauthenticated(ExamHubError):
    kind = ErrorKind.UNAUTHENTICATED


class AccessDenied(ExamHubError):
    kind = ErrorKind.ACCESS_DENIED


class NotFound(ExamHubError):
    kind = ErrorKind.NOT_FOUND

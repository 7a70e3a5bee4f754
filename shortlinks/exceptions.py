"""Error taxonomy for the short link service.

Every failure the core can report is a ``ShortLinksError`` subclass carrying an
``ErrorKind``, an HTTP status and a stable ``error_code``. The API layer renders
them through a single exception handler.
"""

from shortlinks.enums import ErrorKind

__all__ = [
    "ShortLinksError",
    "InvalidInputError",
    "CodeConflictError",
    "LinkNotFoundError",
    "EmptyExportError",
    "StorageFailureError",
    "ExportGenerationError",
]


class ShortLinksError(Exception):
    """Base exception for all application-specific errors."""

    kind = ErrorKind.INTERNAL
    status_code = 500
    error_code = "app:shortlinks_error"

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict[str, str]:
        body = {"message": self.message, "kind": self.kind.value}
        if self.field is not None:
            body["field"] = self.field
        return body


class InvalidInputError(ShortLinksError):
    """Raised when a URL, code, alias or page parameter fails validation."""

    kind = ErrorKind.VALIDATION
    status_code = 400
    error_code = "input:invalid_input_error"


class CodeConflictError(ShortLinksError):
    """Raised when inserting a link whose code is already taken."""

    kind = ErrorKind.CONFLICT
    status_code = 409
    error_code = "store:code_conflict_error"

    def __init__(self, code: str) -> None:
        super().__init__(f"Short code '{code}' is already in use", field="code")
        self.code = code


class LinkNotFoundError(ShortLinksError):
    """Raised when a code has no matching link."""

    kind = ErrorKind.NOT_FOUND
    status_code = 404
    error_code = "store:link_not_found_error"

    def __init__(self, code: str) -> None:
        super().__init__("Link not found")
        self.code = code


class EmptyExportError(ShortLinksError):
    """Raised when an export is requested but no links exist."""

    kind = ErrorKind.EMPTY_EXPORT
    status_code = 400
    error_code = "export:empty_export_error"

    def __init__(self) -> None:
        super().__init__("No links available to export")


class StorageFailureError(ShortLinksError):
    """Raised when the database or the object sink is unavailable.

    Examples include connection issues, timeouts and rejected credentials.
    """

    kind = ErrorKind.STORAGE_FAILURE
    status_code = 503
    error_code = "infra:storage_failure_error"


class ExportGenerationError(StorageFailureError):
    """Raised when the export file could not be handed to the object sink."""

    status_code = 502
    error_code = "export:export_generation_error"

"""Service-level exceptions mapped to HTTP responses in ``main``."""

from typing import Any, Dict, Optional


class StudentServiceError(Exception):
    """Base exception for errors reported to API clients."""

    status_code = 500

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)


class ResourceNotFoundError(StudentServiceError):
    """Raised when a requested record does not exist (404)."""

    status_code = 404

    def __init__(self, resource: str, field: str, value: Any):
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(f"{resource} not found with {field}: '{value}'")


class ValidationError(StudentServiceError):
    """Raised when client input fails business validation (400).

    Collects one message per offending field in ``errors``.
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[Dict[str, str]] = None,
    ):
        super().__init__(message)
        self.errors: Dict[str, str] = dict(errors or {})

    def add_error(self, field: str, message: str) -> None:
        self.errors[field] = message

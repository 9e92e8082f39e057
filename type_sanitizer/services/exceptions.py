"""
Error taxonomy for the sanitizer.
Value-safe: messages name fields and types, never input values.
"""
from enum import Enum


class SanitizerErrorCode(str, Enum):
    """Value-safe error codes for sanitizer failures."""
    PARSE_ERROR = "PARSE_ERROR"
    UNKNOWN_TYPE = "UNKNOWN_TYPE"
    INVALID_FIELD = "INVALID_FIELD"
    CONSTRUCTION_ERROR = "CONSTRUCTION_ERROR"


class SanitizerError(Exception):
    """
    Base exception for sanitizer errors.

    Attributes:
        error_code: Value-safe error code for logging and metrics
        message: Value-safe message (no input data)
    """

    def __init__(
        self,
        error_code: SanitizerErrorCode,
        message: str = "Sanitization failed"
    ):
        self.error_code = error_code
        self.message = message
        super().__init__(message)


class ParseError(SanitizerError):
    """Raised when input text is not valid JSON or has an unusable shape."""

    def __init__(self, reason: str = "Invalid JSON string"):
        super().__init__(
            error_code=SanitizerErrorCode.PARSE_ERROR,
            message=reason
        )


class UnknownTypeError(SanitizerError):
    """Raised when a target type cannot be resolved or introspected."""

    def __init__(self, type_name: str = "unknown"):
        self.type_name = type_name
        super().__init__(
            error_code=SanitizerErrorCode.UNKNOWN_TYPE,
            message=f"Unknown target type: {type_name}"
        )


class InvalidFieldError(SanitizerError):
    """Raised under the fail-hard policy when a field coerced to null."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(
            error_code=SanitizerErrorCode.INVALID_FIELD,
            message=f"Invalid field {field}"
        )


class ConstructionError(SanitizerError):
    """Raised when a target type cannot be default-constructed or populated."""

    def __init__(self, type_name: str = "unknown", reason: str = "cannot be constructed"):
        self.type_name = type_name
        super().__init__(
            error_code=SanitizerErrorCode.CONSTRUCTION_ERROR,
            message=f"Target type {type_name} {reason}"
        )

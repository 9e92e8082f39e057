"""
Sanitizers module.
Public entry points for type-driven record sanitization.
"""
from type_sanitizer.services.exceptions import (
    ConstructionError,
    InvalidFieldError,
    ParseError,
    SanitizerError,
    UnknownTypeError,
)
from type_sanitizer.services.failure_policy import FailurePolicy
from type_sanitizer.services.filters import FilterRule, resolve_filter
from type_sanitizer.services.type_sanitizer import TypeSanitizer, sanitize

__all__ = [
    "TypeSanitizer",
    "sanitize",
    "FailurePolicy",
    "FilterRule",
    "resolve_filter",
    "SanitizerError",
    "ParseError",
    "UnknownTypeError",
    "InvalidFieldError",
    "ConstructionError",
]

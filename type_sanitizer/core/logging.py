"""
Value-safe logging module.
CRITICAL: Never log input values. Sanitizer input is untrusted by definition.
Only log: field names, counts, policy, error codes, latency.
"""
import logging
import sys
from typing import Any, Optional

from type_sanitizer.core.config import get_settings

PACKAGE_LOGGER = "type_sanitizer"


def setup_logging() -> logging.Logger:
    """
    Attach a value-safe stdout handler to the package logger.

    Opt-in for applications embedding the sanitizer; the package itself never
    calls it and never touches the root logger. Safe to call repeatedly.
    """
    settings = get_settings()

    log_level = logging.DEBUG if settings.service_env == "dev" else logging.INFO

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(log_level)

    if not any(getattr(h, "_type_sanitizer", False) for h in package_logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        ))
        handler._type_sanitizer = True
        package_logger.addHandler(handler)

    return package_logger


class SafeLogger:
    """
    Value-safe logger wrapper.
    Only allows logging of allow-listed context keys; anything else is dropped.
    """

    SAFE_FIELDS = frozenset({
        "field",
        "fields_count",
        "records_count",
        "null_fields",
        "policy",
        "target_type",
        "error_code",
        "latency_ms",
        "input_kind",
        "exception_class",
    })

    def __init__(self, name: str):
        self._logger = logging.getLogger(name)

    def _format_safe_context(self, context: dict[str, Any]) -> str:
        """Format only safe fields from context."""
        safe_items = []
        for key, value in context.items():
            if key in self.SAFE_FIELDS:
                safe_items.append(f"{key}={value}")
        return " | ".join(safe_items) if safe_items else ""

    def _emit(self, level: int, message: str, context: dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        ctx = self._format_safe_context(context)
        self._logger.log(level, f"{message} | {ctx}" if ctx else message)

    def info(self, message: str, **context: Any) -> None:
        """Log info with safe context only."""
        self._emit(logging.INFO, message, context)

    def warning(self, message: str, **context: Any) -> None:
        """Log warning with safe context only."""
        self._emit(logging.WARNING, message, context)

    def error(
        self,
        message: str,
        error_code: Optional[str] = None,
        **context: Any
    ) -> None:
        """
        Log error with safe context only.
        NEVER log exception messages that might echo input values.
        """
        if error_code:
            context["error_code"] = error_code
        self._emit(logging.ERROR, message, context)

    def debug(self, message: str, **context: Any) -> None:
        """Log debug with safe context only."""
        self._emit(logging.DEBUG, message, context)


def get_safe_logger(name: str) -> SafeLogger:
    """Get a value-safe logger instance."""
    return SafeLogger(name)

"""
Sanitizer façade: the single public entry point.

Pipeline per call:
1. Decode JSON text (if data is text)
2. Resolve the specification (explicit map or target type)
3. Apply it to the record(s)
4. Enforce the failure policy
5. Materialize target type instances (type specifications only)

Value-safe: logs and metrics carry counts, names and error codes only.
"""
import json
import time
from functools import lru_cache
from typing import Any, Optional, Union

from type_sanitizer.core.config import Settings, get_settings
from type_sanitizer.core.logging import get_safe_logger
from type_sanitizer.core.metrics import get_metrics_collector
from type_sanitizer.services.engine import apply_specification, count_records
from type_sanitizer.services.exceptions import ParseError, SanitizerError
from type_sanitizer.services.failure_policy import (
    FailurePolicy,
    coerce_policy,
    count_nulls,
    enforce_failure_policy,
)
from type_sanitizer.services.materializer import materialize
from type_sanitizer.services.specification import (
    is_type_specification,
    load_type,
    resolve_specification,
    type_name,
)

logger = get_safe_logger(__name__)

JsonText = Union[str, bytes, bytearray]


def decode_json_text(text: JsonText, max_bytes: Optional[int] = None) -> Any:
    """
    Decode JSON text into plain Python data.

    Raises:
        ParseError: If the text is malformed or larger than max_bytes
    """
    try:
        if max_bytes is not None:
            size = len(text) if isinstance(text, (bytes, bytearray)) else len(text.encode("utf-8"))
            if size > max_bytes:
                raise ParseError(f"JSON text exceeds {max_bytes} bytes")
        return json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError, UnicodeEncodeError) as e:
        raise ParseError("Invalid JSON string") from e


class TypeSanitizer:
    """
    Sanitizes untrusted records against a field specification.

    Usage:
        sanitizer = TypeSanitizer()
        clean = sanitizer.sanitize('{"age": "42"}', {"age": "int"})
        user = sanitizer.sanitize(payload, UserForm, FailurePolicy.NULL_ON_FAILURE)
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()
        self._metrics = get_metrics_collector()

    @property
    def default_policy(self) -> FailurePolicy:
        return coerce_policy(self._settings.default_failure_policy)

    def sanitize(
        self,
        data: Any,
        specification: Any,
        failure_policy: Union[FailurePolicy, str, None] = None,
    ) -> Any:
        """
        Sanitize data against a specification.

        Args:
            data: JSON text, a record (mapping), or a list of records
            specification: Mapping of field name -> type token, a value type,
                or a dotted import path naming a value type
            failure_policy: FAIL_HARD or NULL_ON_FAILURE; None uses the
                configured default

        Returns:
            Sanitized record(s) for a mapping specification, instance(s)
            of the target type otherwise. Lists in, lists out.

        Raises:
            ParseError: Malformed JSON text or input that is not record-shaped
            UnknownTypeError: Target type cannot be resolved
            InvalidFieldError: A field coerced to null under FAIL_HARD
            ConstructionError: Target type cannot be built
        """
        policy = self.default_policy if failure_policy is None else coerce_policy(failure_policy)
        start = time.perf_counter()
        records_count = 0
        null_fields = 0

        try:
            if isinstance(data, (str, bytes, bytearray)):
                data = decode_json_text(data, self._settings.max_json_bytes)

            target_type = None
            if is_type_specification(specification):
                if isinstance(specification, str):
                    specification = load_type(specification)
                target_type = specification

            rules = resolve_specification(specification)
            sanitized = apply_specification(data, rules)
            records_count = count_records(sanitized)
            null_fields = count_nulls(sanitized)

            enforce_failure_policy(sanitized, policy)

            result = materialize(target_type, sanitized) if target_type is not None else sanitized
        except SanitizerError as e:
            latency_ms = (time.perf_counter() - start) * 1000
            self._metrics.record_call(
                latency_ms=latency_ms,
                success=False,
                records_count=records_count,
                null_fields=null_fields,
                error_code=e.error_code.value,
            )
            logger.warning(
                "Sanitization failed",
                error_code=e.error_code.value,
                exception_class=type(e).__name__,
                policy=policy.value,
                records_count=records_count,
            )
            raise

        latency_ms = (time.perf_counter() - start) * 1000
        self._metrics.record_call(
            latency_ms=latency_ms,
            success=True,
            records_count=records_count,
            null_fields=null_fields,
        )
        logger.debug(
            "Sanitization completed",
            fields_count=len(rules),
            records_count=records_count,
            null_fields=null_fields,
            policy=policy.value,
            target_type=type_name(target_type) if target_type is not None else None,
            latency_ms=round(latency_ms, 3),
        )
        return result


@lru_cache()
def get_type_sanitizer() -> TypeSanitizer:
    """Get the shared sanitizer instance."""
    return TypeSanitizer()


def sanitize(
    data: Any,
    specification: Any,
    failure_policy: Union[FailurePolicy, str, None] = None,
) -> Any:
    """Sanitize with the shared instance. See TypeSanitizer.sanitize."""
    return get_type_sanitizer().sanitize(data, specification, failure_policy)

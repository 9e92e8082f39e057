"""
Failure policy enforcement.

Exactly one policy shape is supported: a binary switch between raising on
the first null field and returning nulls to the caller. There is no
"collect all errors" mode.
"""
from enum import Enum
from typing import Any, Iterator, Optional, Union

from type_sanitizer.services.engine import SanitizedData
from type_sanitizer.services.exceptions import InvalidFieldError


class FailurePolicy(str, Enum):
    """How per-field coercion failures (null values) are handled."""
    FAIL_HARD = "fail_hard"
    NULL_ON_FAILURE = "null_on_failure"


def coerce_policy(policy: Union["FailurePolicy", str]) -> FailurePolicy:
    """Accept a FailurePolicy or its string value."""
    if isinstance(policy, FailurePolicy):
        return policy
    try:
        return FailurePolicy(policy)
    except ValueError as e:
        raise ValueError(
            f"Unknown failure policy {policy!r}; expected one of "
            f"{[p.value for p in FailurePolicy]}"
        ) from e


def _child_path(parent: str, key: Any) -> str:
    if isinstance(key, int):
        return f"{parent}[{key}]"
    return f"{parent}.{key}" if parent else str(key)


def iter_null_paths(value: Any, path: str = "") -> Iterator[str]:
    """Yield the path of every None leaf, depth first, in order."""
    if value is None:
        yield path
    elif isinstance(value, dict):
        for key, item in value.items():
            yield from iter_null_paths(item, _child_path(path, key))
    elif isinstance(value, list):
        for index, item in enumerate(value):
            yield from iter_null_paths(item, _child_path(path, index))


def find_first_null(result: SanitizedData) -> Optional[str]:
    """Path of the first None leaf, or None if every leaf holds a value."""
    return next(iter_null_paths(result), None)


def count_nulls(result: SanitizedData) -> int:
    return sum(1 for _ in iter_null_paths(result))


def enforce_failure_policy(
    result: SanitizedData,
    policy: Union[FailurePolicy, str] = FailurePolicy.FAIL_HARD,
) -> SanitizedData:
    """
    Enforce a failure policy on sanitized output.

    Returns:
        The result, unchanged

    Raises:
        InvalidFieldError: Under FAIL_HARD, naming the first null field
    """
    if coerce_policy(policy) is FailurePolicy.NULL_ON_FAILURE:
        return result

    null_path = find_first_null(result)
    if null_path is not None:
        raise InvalidFieldError(null_path)
    return result


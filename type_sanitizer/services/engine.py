"""
Sanitization engine.

Applies a resolved specification to one record or to a list of records.
Per-field failure is never an exception here: a value that cannot be
coerced is written as None and left for the failure policy to judge.
"""
from typing import Any, Dict, List, Mapping, Union

from type_sanitizer.services.exceptions import ParseError
from type_sanitizer.services.filters import apply_filter
from type_sanitizer.services.specification import Specification

SanitizedRecord = Dict[str, Any]
SanitizedData = Union[SanitizedRecord, List[SanitizedRecord]]


def is_record_list(data: Any) -> bool:
    """
    True for positionally indexed input (list or tuple).

    An empty list is a list of zero records, never an empty record.
    """
    return isinstance(data, (list, tuple))


def sanitize_record(record: Mapping[str, Any], specification: Specification) -> SanitizedRecord:
    """
    Sanitize a single record.

    Output keys are exactly the specification's keys, in specification
    order. Input fields missing from the record are filtered as None;
    input fields not named by the specification are dropped.
    """
    return {
        field: apply_filter(rule, record.get(field))
        for field, rule in specification.items()
    }


def apply_specification(data: Any, specification: Specification) -> SanitizedData:
    """
    Sanitize a record or a list of records.

    Args:
        data: Mapping, or list/tuple of mappings
        specification: Resolved field -> FilterRule mapping

    Returns:
        Sanitized record, or a list of sanitized records in input order

    Raises:
        ParseError: If the input (or a list element) is not a record
    """
    if is_record_list(data):
        sanitized: List[SanitizedRecord] = []
        for index, item in enumerate(data):
            if not isinstance(item, Mapping):
                raise ParseError(f"Record at index {index} is not an object")
            sanitized.append(sanitize_record(item, specification))
        return sanitized

    if not isinstance(data, Mapping):
        raise ParseError("Input must be an object or a list of objects")

    return sanitize_record(data, specification)


def count_records(data: Any) -> int:
    """Number of records in sanitized output (1 for a single record)."""
    return len(data) if is_record_list(data) else 1

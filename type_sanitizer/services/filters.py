"""
Filter catalog: maps type tokens to filter rules and applies them.

Every rule is total. A value that cannot be coerced becomes None; no rule
ever raises. Values absent from the input record arrive here as None and
stay None.

Value-safe: nothing in this module logs.
"""
import math
import re
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

from type_sanitizer.schemas import type_tokens


class FilterRule(str, Enum):
    """Closed set of coercion behaviors applied to a single field."""
    ESCAPE = "escape"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    PHONE_NUMBER = "phone_number"
    INT_ARRAY = "int_array"
    NO_RULE = "no_rule"


_TOKEN_RULES: Mapping[str, FilterRule] = {
    type_tokens.STRING: FilterRule.ESCAPE,
    type_tokens.BOOL: FilterRule.BOOL,
    type_tokens.INT: FilterRule.INT,
    type_tokens.FLOAT: FilterRule.FLOAT,
    type_tokens.PHONE_NUMBER: FilterRule.PHONE_NUMBER,
    type_tokens.INT_ARRAY: FilterRule.INT_ARRAY,
}

TRUE_VALUES = frozenset({"1", "true", "on", "yes"})
FALSE_VALUES = frozenset({"0", "false", "off", "no", ""})

INT_MIN = -(2 ** 63)
INT_MAX = 2 ** 63 - 1

_INT_REGEX = re.compile(r"[+-]?(?:0|[1-9]\d*)", re.ASCII)
_FLOAT_REGEX = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)

# Separators stripped before matching: space, plus, parentheses, dash
_PHONE_SEPARATORS = str.maketrans("", "", " +()-")
# 7 or 8, area code without leading zero, 7 subscriber digits
_PHONE_REGEX = re.compile(r"[78][1-9]\d{2}\d{7}", re.ASCII)
PHONE_PREFIX = "+7"

# Ampersands that do not already start a well-formed entity reference
_BARE_AMPERSAND = re.compile(r"&(?![A-Za-z][A-Za-z0-9]*;|#\d+;|#[xX][0-9A-Fa-f]+;)")
_MARKUP_ESCAPES = str.maketrans({
    "<": "&lt;",
    ">": "&gt;",
    "\"": "&quot;",
    "'": "&#x27;",
})


def resolve_filter(token: Any) -> FilterRule:
    """
    Map a type token to its filter rule.

    Unrecognized tokens resolve to NO_RULE, which always yields None.
    """
    if not isinstance(token, str):
        return FilterRule.NO_RULE
    return _TOKEN_RULES.get(token, FilterRule.NO_RULE)


def escape_string(value: Any) -> Optional[str]:
    """
    HTML-escape a string value.

    Numbers are escaped in their string form. Existing entities are not
    double-encoded, so escaping an escaped value is a no-op.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        return None
    return _BARE_AMPERSAND.sub("&amp;", value).translate(_MARKUP_ESCAPES)


def parse_bool_or_null(value: Any) -> Optional[bool]:
    """Parse common boolean encodings; None if unrecognized."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value in (0, 1):
            return bool(value)
        return None
    if not isinstance(value, str):
        return None

    cleaned = value.strip().lower()
    if cleaned in TRUE_VALUES:
        return True
    if cleaned in FALSE_VALUES:
        return False
    return None


def parse_int_or_null(value: Any) -> Optional[int]:
    """Parse an integer-looking string or number; None if unparseable."""
    if isinstance(value, bool):
        return None

    if isinstance(value, int):
        result = value
    elif isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        result = int(value)
    elif isinstance(value, str):
        cleaned = value.strip()
        if not _INT_REGEX.fullmatch(cleaned):
            return None
        result = int(cleaned)
    else:
        return None

    if result < INT_MIN or result > INT_MAX:
        return None
    return result


def parse_float_or_null(value: Any) -> Optional[float]:
    """Parse a decimal-looking string or number; None if unparseable."""
    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            result = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        cleaned = value.strip()
        if not _FLOAT_REGEX.fullmatch(cleaned):
            return None
        result = float(cleaned)
    else:
        return None

    if not math.isfinite(result):
        return None
    return result


def sanitize_phone_number(value: Any) -> Optional[str]:
    """
    Normalize a local phone number to +7XXXXXXXXXX.

    Examples:
        "+7 (912) 345-6789" -> "+79123456789"
        "8 912 345 67 89"   -> "+79123456789"
        "12345"             -> None
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        value = str(value)
    if not isinstance(value, str):
        return None

    digits = value.translate(_PHONE_SEPARATORS)
    if not _PHONE_REGEX.fullmatch(digits):
        return None

    return PHONE_PREFIX + digits[1:]


def parse_int_array(value: Any) -> Optional[List[Optional[int]]]:
    """
    Apply integer parsing to every element of a list.

    Non-list values yield None; nested containers become None elements.
    """
    if not isinstance(value, (list, tuple)):
        return None
    return [parse_int_or_null(item) for item in value]


def _no_rule(value: Any) -> None:
    return None


_RULE_FUNCTIONS: Dict[FilterRule, Callable[[Any], Any]] = {
    FilterRule.ESCAPE: escape_string,
    FilterRule.BOOL: parse_bool_or_null,
    FilterRule.INT: parse_int_or_null,
    FilterRule.FLOAT: parse_float_or_null,
    FilterRule.PHONE_NUMBER: sanitize_phone_number,
    FilterRule.INT_ARRAY: parse_int_array,
    FilterRule.NO_RULE: _no_rule,
}


def apply_filter(rule: FilterRule, value: Any) -> Any:
    """Apply a filter rule to a single value. Never raises."""
    return _RULE_FUNCTIONS[rule](value)

"""
Specification resolution.

A specification is an ordered mapping of field name -> FilterRule. It is
built either from an explicit field -> type token mapping supplied by the
caller, or by reflecting the public fields of a target value type.
"""
import collections.abc
import importlib
import types
from functools import lru_cache
from typing import (
    Annotated,
    Any,
    ClassVar,
    Dict,
    Mapping,
    Tuple,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from pydantic import BaseModel

from type_sanitizer.core.logging import get_safe_logger
from type_sanitizer.schemas import type_tokens
from type_sanitizer.schemas.type_tokens import TypeToken
from type_sanitizer.services.exceptions import UnknownTypeError
from type_sanitizer.services.filters import FilterRule, resolve_filter

logger = get_safe_logger(__name__)

Specification = Dict[str, FilterRule]

_NATIVE_TOKENS: Mapping[Any, str] = {
    str: type_tokens.STRING,
    bool: type_tokens.BOOL,
    int: type_tokens.INT,
    float: type_tokens.FLOAT,
}

_SEQUENCE_ORIGINS = (list, collections.abc.Sequence, collections.abc.MutableSequence)


def type_name(value_type: Any) -> str:
    """Readable, value-safe name for a type (used in logs and errors)."""
    module = getattr(value_type, "__module__", None)
    qualname = getattr(value_type, "__qualname__", None)
    if module and qualname:
        return f"{module}.{qualname}"
    return type(value_type).__name__


def load_type(path: str) -> type:
    """
    Import a value type from a dotted path.

    Accepts "package.module.ClassName" and "package.module:ClassName".

    Raises:
        UnknownTypeError: If the module or attribute cannot be found,
            or the attribute is not a class
    """
    module_name, sep, attr_path = path.partition(":")
    if not sep:
        module_name, _, attr_path = path.rpartition(".")
    if not module_name or not attr_path:
        raise UnknownTypeError(path)

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise UnknownTypeError(path) from e

    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise UnknownTypeError(path) from e

    if not isinstance(target, type):
        raise UnknownTypeError(path)
    return target


def annotation_to_token(annotation: Any) -> str:
    """
    Derive a type token from a field annotation.

    Optional[X] unwraps to X; Annotated[..., TypeToken(name)] uses the
    marker; list[int] maps to "int[]". Anything else yields its type name,
    which resolves to no rule.
    """
    origin = get_origin(annotation)

    if origin is Annotated:
        for meta in annotation.__metadata__:
            if isinstance(meta, TypeToken):
                return meta.name
        return annotation_to_token(get_args(annotation)[0])

    if origin is Union or origin is types.UnionType:
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return annotation_to_token(members[0])
        return "|".join(annotation_to_token(arg) for arg in members)

    if origin in _SEQUENCE_ORIGINS:
        args = get_args(annotation)
        if len(args) == 1 and annotation_to_token(args[0]) == type_tokens.INT:
            return type_tokens.INT_ARRAY
        return getattr(origin, "__name__", "array")

    if isinstance(annotation, type) and annotation in _NATIVE_TOKENS:
        return _NATIVE_TOKENS[annotation]

    return getattr(annotation, "__name__", str(annotation))


def _token_from_metadata(metadata: Any) -> str | None:
    for meta in metadata:
        if isinstance(meta, TypeToken):
            return meta.name
    return None


def describe_fields(value_type: type) -> Tuple[Tuple[str, str], ...]:
    """
    Enumerate (field name, type token) pairs for a type's public fields.

    Pydantic models are read through model_fields; dataclasses and plain
    annotated classes through their resolved type hints.

    Raises:
        UnknownTypeError: If the type's annotations cannot be resolved
    """
    if not isinstance(value_type, type):
        raise UnknownTypeError(type_name(value_type))

    if issubclass(value_type, BaseModel):
        pairs = []
        for name, info in value_type.model_fields.items():
            if name.startswith("_"):
                continue
            token = _token_from_metadata(info.metadata) or annotation_to_token(info.annotation)
            pairs.append((name, token))
        return tuple(pairs)

    try:
        hints = get_type_hints(value_type, include_extras=True)
    except (NameError, TypeError) as e:
        raise UnknownTypeError(type_name(value_type)) from e

    return tuple(
        (name, annotation_to_token(annotation))
        for name, annotation in hints.items()
        if not name.startswith("_") and get_origin(annotation) is not ClassVar
    )


@lru_cache(maxsize=256)
def _resolve_type_rules(value_type: type) -> Tuple[Tuple[str, FilterRule], ...]:
    fields = describe_fields(value_type)
    rules = tuple((name, resolve_filter(token)) for name, token in fields)

    for name, rule in rules:
        if rule is FilterRule.NO_RULE:
            # Unknown declared types always coerce to null; surface them once per type
            logger.warning(
                "Field type has no filter rule",
                field=name,
                target_type=type_name(value_type),
            )
    return rules


def resolve_specification(specification: Any) -> Specification:
    """
    Build a field -> FilterRule mapping.

    Args:
        specification: Explicit mapping of field name -> type token, a
            value type, or a dotted import path naming a value type

    Returns:
        New ordered dict; callers may not share it across calls

    Raises:
        UnknownTypeError: If a value type cannot be resolved or introspected
    """
    if isinstance(specification, Mapping):
        return {field: resolve_filter(token) for field, token in specification.items()}

    if isinstance(specification, str):
        specification = load_type(specification)

    if not isinstance(specification, type):
        raise UnknownTypeError(type(specification).__name__)

    return dict(_resolve_type_rules(specification))


def is_type_specification(specification: Any) -> bool:
    """True when the specification names a target type rather than a field map."""
    return not isinstance(specification, Mapping)

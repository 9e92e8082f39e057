"""
Object materialization: turns sanitized records into target type instances.

Each target type gets a setter map (field name -> setter) built once and
cached. Record keys with no public field on the target are skipped.
"""
import dataclasses
from functools import lru_cache
from typing import Any, Callable, List, Mapping, Union

from pydantic import BaseModel

from type_sanitizer.core.logging import get_safe_logger
from type_sanitizer.services.engine import SanitizedData, is_record_list
from type_sanitizer.services.exceptions import ConstructionError, UnknownTypeError
from type_sanitizer.services.specification import describe_fields, type_name

logger = get_safe_logger(__name__)

Setter = Callable[[Any, Any], None]


def _is_frozen(target_type: type) -> bool:
    if issubclass(target_type, BaseModel):
        return bool(target_type.model_config.get("frozen"))
    if dataclasses.is_dataclass(target_type):
        return target_type.__dataclass_params__.frozen
    return False


def _make_setter(name: str) -> Setter:
    def setter(instance: Any, value: Any) -> None:
        setattr(instance, name, value)
    return setter


@lru_cache(maxsize=256)
def build_setter_map(target_type: type) -> Mapping[str, Setter]:
    """
    Build the field setter map for a target type.

    Raises:
        ConstructionError: If the type cannot be introspected or is frozen
    """
    try:
        fields = describe_fields(target_type)
    except UnknownTypeError as e:
        raise ConstructionError(type_name(target_type), "cannot be introspected") from e

    if _is_frozen(target_type):
        raise ConstructionError(type_name(target_type), "is frozen and cannot be populated")

    return {name: _make_setter(name) for name, _ in fields}


def build_object(target_type: type, record: Mapping[str, Any]) -> Any:
    """
    Create a default instance of target_type and assign record values.

    Values are assigned as-is; they were coerced by the engine already.

    Raises:
        ConstructionError: If the type has no usable no-argument
            constructor or rejects an assignment
    """
    setters = build_setter_map(target_type)

    try:
        instance = target_type()
    except Exception as e:
        raise ConstructionError(type_name(target_type), "cannot be default-constructed") from e

    for field, value in record.items():
        setter = setters.get(field)
        if setter is None:
            logger.debug(
                "Skipping field with no public target attribute",
                field=field,
                target_type=type_name(target_type),
            )
            continue
        try:
            setter(instance, value)
        except (AttributeError, TypeError, ValueError) as e:
            raise ConstructionError(
                type_name(target_type), f"rejected assignment to field {field}"
            ) from e

    return instance


def materialize(target_type: type, data: SanitizedData) -> Union[Any, List[Any]]:
    """Build one instance per sanitized record, preserving list shape and order."""
    if is_record_list(data):
        return [build_object(target_type, record) for record in data]
    return build_object(target_type, data)


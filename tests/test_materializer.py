"""
Tests for object materialization from sanitized records.
"""
from dataclasses import dataclass
from typing import List, Optional

import pytest
from pydantic import BaseModel, ConfigDict

from type_sanitizer.services.exceptions import ConstructionError
from type_sanitizer.services.materializer import build_object, build_setter_map, materialize


class Account(BaseModel):
    login: str = ""
    age: Optional[int] = None
    ids: List[int] = []


@dataclass
class Point:
    x: int = 0
    y: int = 0


class Plain:
    label: str

    def __init__(self):
        self.label = "default"


class RequiresArgs:
    value: int

    def __init__(self, value):
        self.value = value


class RequiredField(BaseModel):
    value: int


@dataclass(frozen=True)
class FrozenPoint:
    x: int = 0


class StrictAccount(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    age: int = 0


class TestBuildObject:
    """Single-instance materialization."""

    def test_pydantic_model_populated(self):
        account = build_object(Account, {"login": "neo", "age": 30, "ids": [1, 2]})
        assert isinstance(account, Account)
        assert account.login == "neo"
        assert account.age == 30
        assert account.ids == [1, 2]

    def test_dataclass_populated(self):
        point = build_object(Point, {"x": 3, "y": 4})
        assert (point.x, point.y) == (3, 4)

    def test_plain_class_populated(self):
        assert build_object(Plain, {"label": "new"}).label == "new"

    def test_unknown_fields_skipped(self):
        point = build_object(Point, {"x": 1, "z": 9})
        assert point.x == 1
        assert not hasattr(point, "z")

    def test_null_values_assigned_as_is(self):
        account = build_object(Account, {"age": None})
        assert account.age is None

    def test_fresh_instance_per_call(self):
        first = build_object(Point, {"x": 1})
        second = build_object(Point, {"x": 1})
        assert first is not second
        assert first == second


class TestConstructionFailures:
    """Types that cannot be default-constructed or populated."""

    def test_constructor_requires_arguments(self):
        with pytest.raises(ConstructionError) as exc_info:
            build_object(RequiresArgs, {"value": 1})
        assert exc_info.value.error_code.value == "CONSTRUCTION_ERROR"
        assert "RequiresArgs" in exc_info.value.message

    def test_pydantic_required_field(self):
        with pytest.raises(ConstructionError):
            build_object(RequiredField, {"value": 1})

    def test_frozen_dataclass(self):
        with pytest.raises(ConstructionError):
            build_object(FrozenPoint, {"x": 1})

    def test_rejected_assignment(self):
        with pytest.raises(ConstructionError) as exc_info:
            build_object(StrictAccount, {"age": None})
        assert "age" in exc_info.value.message


class TestMaterialize:
    """List vs. single record."""

    def test_list_of_instances_in_order(self):
        points = materialize(Point, [{"x": 1}, {"x": 2}, {"x": 3}])
        assert [p.x for p in points] == [1, 2, 3]

    def test_empty_list(self):
        assert materialize(Point, []) == []

    def test_single_record(self):
        assert materialize(Point, {"x": 5}).x == 5


class TestSetterMap:
    """Setter maps are built once per type."""

    def test_cached_per_type(self):
        assert build_setter_map(Point) is build_setter_map(Point)

    def test_contains_public_fields_only(self):
        assert set(build_setter_map(Account)) == {"login", "age", "ids"}

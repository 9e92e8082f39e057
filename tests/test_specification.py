"""
Tests for specification resolution: explicit maps, reflected value types,
annotation -> token derivation and dotted-path type loading.
"""
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated, ClassVar, List, Optional, Sequence, Union

import pytest
from pydantic import BaseModel

from type_sanitizer.schemas.type_tokens import IntList, PhoneNumber, TypeToken
from type_sanitizer.services.exceptions import UnknownTypeError
from type_sanitizer.services.filters import FilterRule
from type_sanitizer.services.specification import (
    annotation_to_token,
    describe_fields,
    is_type_specification,
    load_type,
    resolve_specification,
)


class ProfileModel(BaseModel):
    name: str = ""
    age: int = 0
    score: float = 0.0
    active: bool = False
    phone: PhoneNumber = ""
    ids: List[int] = []
    optional_ids: Optional[IntList] = None
    created: Optional[datetime] = None
    _secret: str = "hidden"


@dataclass
class ProfileRecord:
    age: Optional[int] = None
    phone: Annotated[Optional[str], TypeToken("phoneNumber")] = None
    tags: List[str] = field(default_factory=list)
    VERSION: ClassVar[int] = 1
    _internal: int = 0


class PlainProfile:
    nickname: str
    balance: float


class BrokenAnnotations:
    value: "MissingType"  # noqa: F821


class TestExplicitSpecification:
    """Explicit field -> token mappings."""

    def test_tokens_resolved_in_order(self):
        spec = resolve_specification({"b": "int", "a": "string", "c": "int[]"})
        assert list(spec) == ["b", "a", "c"]
        assert spec == {"b": FilterRule.INT, "a": FilterRule.ESCAPE, "c": FilterRule.INT_ARRAY}

    def test_unknown_and_non_string_tokens_have_no_rule(self):
        spec = resolve_specification({"x": "unknownType", "y": 3})
        assert spec == {"x": FilterRule.NO_RULE, "y": FilterRule.NO_RULE}

    def test_returns_fresh_dict(self):
        mapping = {"a": "int"}
        first = resolve_specification(mapping)
        first["b"] = FilterRule.INT
        assert resolve_specification(mapping) == {"a": FilterRule.INT}

    def test_is_not_type_specification(self):
        assert is_type_specification({"a": "int"}) is False


class TestReflectedSpecification:
    """Specifications derived from value type declarations."""

    def test_pydantic_model_fields(self):
        assert describe_fields(ProfileModel) == (
            ("name", "string"),
            ("age", "int"),
            ("score", "float"),
            ("active", "bool"),
            ("phone", "phoneNumber"),
            ("ids", "int[]"),
            ("optional_ids", "int[]"),
            ("created", "datetime"),
        )

    def test_dataclass_fields_skip_private_and_classvar(self):
        assert describe_fields(ProfileRecord) == (
            ("age", "int"),
            ("phone", "phoneNumber"),
            ("tags", "list"),
        )

    def test_plain_annotated_class(self):
        assert describe_fields(PlainProfile) == (("nickname", "string"), ("balance", "float"))

    def test_resolve_from_type(self):
        spec = resolve_specification(ProfileRecord)
        assert spec == {
            "age": FilterRule.INT,
            "phone": FilterRule.PHONE_NUMBER,
            "tags": FilterRule.NO_RULE,
        }

    def test_resolve_from_dotted_path(self):
        path = f"{ProfileRecord.__module__}:{ProfileRecord.__qualname__}"
        assert resolve_specification(path) == resolve_specification(ProfileRecord)

    def test_unknown_declared_type_matches_explicit_unknown_token(self):
        reflected = resolve_specification(ProfileModel)["created"]
        explicit = resolve_specification({"created": "datetime"})["created"]
        assert reflected is explicit is FilterRule.NO_RULE

    def test_unresolvable_annotations_raise(self):
        with pytest.raises(UnknownTypeError):
            resolve_specification(BrokenAnnotations)

    def test_non_type_specification_raises(self):
        with pytest.raises(UnknownTypeError):
            resolve_specification(42)

    def test_type_is_type_specification(self):
        assert is_type_specification(ProfileModel) is True
        assert is_type_specification("pkg.module.Type") is True


class TestAnnotationToToken:
    """Token derivation from individual annotations."""

    @pytest.mark.parametrize("annotation,token", [
        (str, "string"),
        (bool, "bool"),
        (int, "int"),
        (float, "float"),
        (Optional[int], "int"),
        (int | None, "int"),
        (List[int], "int[]"),
        (list[int], "int[]"),
        (Sequence[int], "int[]"),
        (Optional[List[int]], "int[]"),
        (PhoneNumber, "phoneNumber"),
        (Optional[PhoneNumber], "phoneNumber"),
        (Annotated[int, "unrelated metadata"], "int"),
        (list[str], "list"),
        (list, "list"),
        (datetime, "datetime"),
        (Union[int, str], "int|string"),
    ])
    def test_tokens(self, annotation, token):
        assert annotation_to_token(annotation) == token


class TestLoadType:
    """Dotted-path type loading."""

    def test_colon_form(self):
        assert load_type("collections:OrderedDict") is OrderedDict

    def test_dotted_form(self):
        assert load_type("collections.OrderedDict") is OrderedDict

    @pytest.mark.parametrize("path", [
        "no_such_module_xyz.Thing",
        "collections.NoSuchThing",
        "json.loads",
        "Nothing",
        "collections:",
    ])
    def test_unresolvable_paths_raise(self, path):
        with pytest.raises(UnknownTypeError) as exc_info:
            load_type(path)
        assert exc_info.value.error_code.value == "UNKNOWN_TYPE"

#!/usr/bin/env python3
import collections
import datetime
import importlib
import sys
import textwrap
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Annotated,
    Any,
    Counter,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Literal,
    Mapping,
    NamedTuple,
    NewType,
    Optional,
    Sequence,
    Set,
    Tuple,
    TypedDict,
    TypeVar,
    Union,
)

import pytest
from pydantic import BaseModel, Field

from schemagen.core.errors import InvalidTagError
from schemagen.core.schema import introspect as I
from schemagen.core.schema.introspect import TypeCategory
from schemagen.core.schema.tags import Tags

T = TypeVar("T")


# --- Fixtures --- #

@dataclass
class Inventory:
    sku: str = field(default="", metadata={"json": "SKU", "required": "true"})
    count: Annotated[int, Tags(min=0)] = 0
    _cache: dict = field(default_factory=dict)


class Customer(BaseModel):
    name: str = Field(alias="fullName", description="Display name")
    email: Annotated[str, Tags(pattern=".+@.+")] = Field(default="", json_schema_extra={"description": "Contact"})


class Coord(NamedTuple):
    lat: float
    lon: float


class Row(TypedDict):
    id: int
    label: str


class Color(Enum):
    RED = "red"
    BLUE = "blue"


# --- peel / unwrap_optional --- #

def test_peel_strips_wrappers_and_collects_extras():
    tp, extras = I.peel(Optional[Annotated[int, "a", "b"]])
    assert tp is int
    assert extras == ("a", "b")


def test_peel_nested_annotated_outermost_first():
    tp, extras = I.peel(Annotated[Optional[Annotated[str, "inner"]], "outer"])
    assert tp is str
    assert extras == ("outer", "inner")


def test_peel_keeps_multi_type_union():
    tp, extras = I.peel(Union[int, str, None])
    assert tp == Union[int, str, None]
    assert extras == ()


def test_peel_pep604_optional():
    assert I.peel(int | None) == (int, ())


def test_peel_unwraps_newtype_chain():
    UserId = NewType("UserId", int)
    AccountId = NewType("AccountId", UserId)
    assert I.peel(Optional[Annotated[AccountId, "x"]]) == (int, ("x",))
    assert I.is_newtype(AccountId)
    assert not I.is_newtype(int)


def test_unwrap_optional():
    assert I.unwrap_optional(Optional[str]) is str
    assert I.unwrap_optional(str) is str
    assert I.unwrap_optional(Union[int, str]) == Union[int, str]


# --- classify --- #

@pytest.mark.parametrize("tp,category", [
    (datetime.datetime, TypeCategory.TIMESTAMP),
    (bytes, TypeCategory.BYTES),
    (bytearray, TypeCategory.BYTES),
    (memoryview, TypeCategory.BYTES),
    (Inventory, TypeCategory.STRUCT),
    (Customer, TypeCategory.STRUCT),
    (Coord, TypeCategory.STRUCT),
    (Row, TypeCategory.STRUCT),
    (List[int], TypeCategory.SEQUENCE),
    (Set[int], TypeCategory.SEQUENCE),
    (FrozenSet[str], TypeCategory.SEQUENCE),
    (Tuple[int, ...], TypeCategory.SEQUENCE),
    (Sequence[str], TypeCategory.SEQUENCE),
    (Iterable[str], TypeCategory.SEQUENCE),
    (collections.deque, TypeCategory.SEQUENCE),
    (Dict[str, int], TypeCategory.MAPPING),
    (Mapping[str, int], TypeCategory.MAPPING),
    (Counter[str], TypeCategory.MAPPING),
    (collections.OrderedDict, TypeCategory.MAPPING),
    (Any, TypeCategory.OPEN),
    (object, TypeCategory.OPEN),
    (T, TypeCategory.OPEN),
    ("Forward", TypeCategory.OPEN),
    (Union[int, str], TypeCategory.OPEN),
    (Color, TypeCategory.ENUMERATION),
    (Literal["x"], TypeCategory.ENUMERATION),
    (bool, TypeCategory.PRIMITIVE),
    (int, TypeCategory.PRIMITIVE),
    (str, TypeCategory.PRIMITIVE),
    (datetime.date, TypeCategory.UNKNOWN),
    (complex, TypeCategory.UNKNOWN),
])
def test_classify(tp, category):
    assert I.classify(tp) is category


def test_str_is_not_a_sequence():
    assert not I.is_sequence(str)
    assert not I.is_sequence(bytes)
    assert not I.is_sequence(dict)


def test_is_struct_rejects_instances():
    assert not I.is_struct(Inventory())
    assert I.is_struct(Inventory)


# --- Element / value types --- #

@pytest.mark.parametrize("tp,element", [
    (List[int], int),
    (list, Any),
    (Tuple[str, ...], str),
    (Tuple[int, int, int], int),
    (Tuple[int, str], Any),
    (Tuple[()], Any),
    (tuple, Any),
    (Iterable[float], float),
])
def test_sequence_element(tp, element):
    assert I.sequence_element(tp) is element


@pytest.mark.parametrize("tp,value", [
    (Dict[str, float], float),
    (dict, Any),
    (Counter[str], int),
    (collections.Counter, int),
])
def test_mapping_value(tp, value):
    assert I.mapping_value(tp) is value


def test_enumeration_values():
    assert I.enumeration_values(Color) == ["red", "blue"]
    assert I.enumeration_values(Literal[1, 2]) == [1, 2]


# --- struct_members --- #

def test_dataclass_members():
    members = I.struct_members(Inventory, path="Inventory")
    assert [m.attr for m in members] == ["sku", "count"]
    sku, count = members
    assert sku.external_name == "SKU"
    assert sku.tags.is_required
    assert sku.type is str
    assert count.type is int
    assert count.tags == Tags(min="0")


def test_dataclass_metadata_overrides_annotated_tags():
    @dataclass
    class Both:
        v: Annotated[str, Tags(description="annotated", pattern="a")] = field(
            default="", metadata={"description": "metadata"}
        )

    (member,) = I.struct_members(Both)
    assert member.tags == Tags(description="metadata", pattern="a")


def test_dataclass_members_carry_instance_values():
    members = I.struct_members(Inventory, Inventory(sku="A1", count=3))
    assert [m.value for m in members] == ["A1", 3]


def test_values_ignored_when_not_an_instance():
    members = I.struct_members(Inventory, {"sku": "A1"})
    assert all(m.value is None for m in members)


def test_model_members_use_alias_and_description():
    name, email = I.struct_members(Customer)
    assert name.attr == "name"
    assert name.external_name == "fullName"
    assert name.tags.description == "Display name"
    assert email.external_name == "email"
    assert email.tags == Tags(description="Contact", pattern=".+@.+")


def test_model_exclude_marks_member_excluded():
    class Hidden(BaseModel):
        shown: int = 0
        token: str = Field(default="", exclude=True)

    members = {m.attr: m for m in I.struct_members(Hidden)}
    assert not members["shown"].is_excluded
    assert members["token"].is_excluded


def test_namedtuple_members_and_values():
    members = I.struct_members(Coord, Coord(1.0, 2.0))
    assert [(m.attr, m.type, m.value) for m in members] == [("lat", float, 1.0), ("lon", float, 2.0)]


def test_typeddict_members_and_values():
    members = I.struct_members(Row, {"id": 7, "label": "x"})
    assert [(m.attr, m.type, m.value) for m in members] == [("id", int, 7), ("label", str, "x")]


def test_member_metadata_error_carries_path():
    @dataclass
    class Broken:
        n: int = field(default=0, metadata={"exclusiveMin": "zero"})

    with pytest.raises(InvalidTagError) as exc:
        I.struct_members(Broken, path="Broken")
    assert exc.value.path == "Broken.n"


def test_type_hints_fall_back_on_unresolvable_forward_ref():
    @dataclass
    class Dangling:
        ok: int = 0
        later: "MissingType" = None  # noqa: F821

    hints = I.type_hints(Dangling)
    assert hints["ok"] is int
    assert hints["later"] == "MissingType"
    assert I.classify(hints["later"]) is TypeCategory.OPEN


POSTPONED_MODULE_NAME = "introspect_postponed_models"

POSTPONED_MODULE_SOURCE = textwrap.dedent('''
    from __future__ import annotations

    from dataclasses import dataclass
    from typing import List


    @dataclass
    class Base:
        count: int = 0


    @dataclass
    class PartlyUnresolved(Base):
        names: List[str] = None
        other: DoesNotExist = None
''')


def test_type_hints_resolve_each_member_under_postponed_annotations(tmp_path, monkeypatch):
    (tmp_path / f"{POSTPONED_MODULE_NAME}.py").write_text(POSTPONED_MODULE_SOURCE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, POSTPONED_MODULE_NAME, raising=False)
    module = importlib.import_module(POSTPONED_MODULE_NAME)
    try:
        hints = I.type_hints(module.PartlyUnresolved)
    finally:
        sys.modules.pop(POSTPONED_MODULE_NAME, None)

    assert list(hints) == ["count", "names", "other"]
    assert hints["count"] is int
    assert hints["names"] == List[str]
    assert hints["other"] == "DoesNotExist"

#!/usr/bin/env python3
"""
Purpose:
    Type introspection helpers for the walker: peeling `Annotated`/`Optional`
    wrappers, classifying a type into a derivation category, and enumerating
    the members of struct-like classes (dataclasses, pydantic models,
    NamedTuples, TypedDicts) together with their annotations.
"""
from __future__ import annotations

import collections
import collections.abc as cabc
import dataclasses
import datetime
import enum
import sys
import types
import typing
from dataclasses import dataclass
from decimal import Decimal
from typing import (
    Annotated,
    Any,
    Dict,
    ForwardRef,
    List,
    Literal,
    Optional,
    Tuple,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
    is_typeddict,
)

from pydantic import BaseModel

from schemagen.core.log import get_logger
from schemagen.core.schema.tags import Tags

logger = get_logger(__name__)

NoneType = type(None)


# --- Categories --- #

class TypeCategory(str, enum.Enum):
    """Derivation categories, listed in dispatch priority order."""

    TIMESTAMP = "timestamp"
    BYTES = "bytes"
    STRUCT = "struct"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    OPEN = "open"
    ENUMERATION = "enumeration"
    PRIMITIVE = "primitive"
    UNKNOWN = "unknown"


BYTES_TYPES: Tuple[type, ...] = (bytes, bytearray, memoryview)

# TypedDict item qualifiers, stripped like `Annotated`
QUALIFIER_ORIGINS: Tuple[Any, ...] = tuple(
    q for q in (getattr(typing, "Required", None), getattr(typing, "NotRequired", None)) if q is not None
)

# Abstract iterables treated as sequences even though they are not `Sequence`
ITERABLE_ORIGINS: Tuple[type, ...] = (cabc.Iterable, cabc.Collection)


# --- Members --- #

@dataclass(frozen=True)
class Member:
    """One exported member of a struct-like class."""
    attr: str
    type: Any
    tags: Tags
    value: Any = None

    @property
    def external_name(self) -> str:
        """Serialization name from tags, else the declared attribute name."""
        return self.tags.serialization_name or self.attr

    @property
    def is_excluded(self) -> bool:
        return self.tags.is_excluded


# --- Wrappers --- #

def peel(tp: Any) -> Tuple[Any, Tuple[Any, ...]]:
    """
    Strip `Annotated[...]`, single-type `Optional[...]`, TypedDict
    `Required`/`NotRequired` wrappers and `NewType` aliases (to their
    supertype).

    Returns the inner type and every `Annotated` extra met on the way,
    outermost first.

    >>> peel(Optional[Annotated[int, "x"]])
    (<class 'int'>, ('x',))
    """
    extras: Tuple[Any, ...] = ()
    while True:
        if get_origin(tp) is Annotated:
            args = get_args(tp)
            tp, extras = args[0], extras + tuple(args[1:])
            continue
        if QUALIFIER_ORIGINS and get_origin(tp) in QUALIFIER_ORIGINS:
            tp = get_args(tp)[0]
            continue
        if is_newtype(tp):
            tp = tp.__supertype__
            continue
        inner = unwrap_optional(tp)
        if inner is tp:
            return tp, extras
        tp = inner


def unwrap_optional(tp: Any) -> Any:
    """Return T for `Optional[T]`/`T | None`; anything else unchanged."""
    if not _is_union(tp):
        return tp
    members = [a for a in get_args(tp) if a is not NoneType]
    if len(members) == 1:
        return members[0]
    return tp


def is_newtype(tp: Any) -> bool:
    """True for `typing.NewType` aliases."""
    return callable(tp) and hasattr(tp, "__supertype__")


def _is_union(tp: Any) -> bool:
    origin = get_origin(tp)
    return origin is Union or origin is types.UnionType


# --- Classification --- #

def is_open(tp: Any) -> bool:
    """True if the type carries no concrete shape (Any, object, TypeVar, unions, ...)."""
    tp, _ = peel(tp)
    if tp is Any or tp is object or tp is None or tp is NoneType:
        return True
    if isinstance(tp, (TypeVar, ForwardRef, str)):
        return True
    return _is_union(tp)


def is_struct(tp: Any) -> bool:
    """True for dataclasses, pydantic models, NamedTuples and TypedDicts (classes, not instances)."""
    if not isinstance(tp, type):
        return False
    if dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel):
        return True
    return is_namedtuple(tp) or is_typeddict(tp)


def is_namedtuple(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, tuple) and hasattr(tp, "_fields")


def container_class(tp: Any) -> Optional[type]:
    """The runtime class behind a (possibly parameterized) container type."""
    origin = get_origin(tp) or tp
    return origin if isinstance(origin, type) else None


def is_mapping(tp: Any) -> bool:
    cls = container_class(tp)
    return cls is not None and issubclass(cls, cabc.Mapping)


def is_sequence(tp: Any) -> bool:
    cls = container_class(tp)
    if cls is None or issubclass(cls, (str, *BYTES_TYPES)) or issubclass(cls, cabc.Mapping):
        return False
    if issubclass(cls, (cabc.Sequence, cabc.Set)):
        return True
    return cls in ITERABLE_ORIGINS


def is_enumeration(tp: Any) -> bool:
    """True for `enum.Enum` subclasses and `Literal[...]` forms."""
    if get_origin(tp) is Literal:
        return True
    return isinstance(tp, type) and issubclass(tp, enum.Enum)


def classify(tp: Any) -> TypeCategory:
    """
    Classify a peeled type. Checks run in dispatch priority order:
    timestamp, bytes, struct, sequence, mapping, open, enumeration, primitive.
    """
    if isinstance(tp, type) and issubclass(tp, datetime.datetime):
        return TypeCategory.TIMESTAMP
    if isinstance(tp, type) and issubclass(tp, BYTES_TYPES):
        return TypeCategory.BYTES
    if is_struct(tp):
        return TypeCategory.STRUCT
    if is_sequence(tp):
        return TypeCategory.SEQUENCE
    if is_mapping(tp):
        return TypeCategory.MAPPING
    if is_open(tp):
        return TypeCategory.OPEN
    if is_enumeration(tp):
        return TypeCategory.ENUMERATION
    if isinstance(tp, type) and issubclass(tp, (bool, int, float, Decimal, str)):
        return TypeCategory.PRIMITIVE
    return TypeCategory.UNKNOWN


# --- Container element types --- #

def sequence_element(tp: Any) -> Any:
    """
    Element type of a sequence type; `Any` when unparameterized.

    Tuples: `tuple[T, ...]` → T; fixed tuples of one repeated type → that
    type; heterogeneous fixed tuples → `Any`.
    """
    args = get_args(tp)
    cls = container_class(tp)
    if cls is not None and issubclass(cls, tuple):
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        if not args or args == ((),):
            return Any
        first = args[0]
        return first if all(a == first for a in args) else Any
    return args[0] if args else Any


def mapping_value(tp: Any) -> Any:
    """Value type of a mapping type; `Any` when unparameterized."""
    cls = container_class(tp)
    if cls is not None and issubclass(cls, collections.Counter):
        return int
    args = get_args(tp)
    return args[1] if len(args) == 2 else Any


def enumeration_values(tp: Any) -> List[Any]:
    """Allowed values of an Enum class or Literal form, in declaration order."""
    if get_origin(tp) is Literal:
        return list(get_args(tp))
    return [member.value for member in tp]


# --- Struct members --- #

def struct_members(tp: type, value: Any = None, *, path: str = "") -> List[Member]:
    """
    Enumerate exported members of a struct-like class in declaration order.

    Members whose name starts with `_` are skipped. `value`, when it is an
    instance of `tp`, supplies each member's runtime value.

    Raises:
        InvalidTagError: if a member's metadata holds malformed tag text.
    """
    if is_typeddict(tp):
        instance = value if isinstance(value, dict) else None
    else:
        instance = value if isinstance(value, tp) else None
    if issubclass(tp, BaseModel):
        members = _model_members(tp, instance, path)
    elif dataclasses.is_dataclass(tp):
        members = _dataclass_members(tp, instance, path)
    else:
        members = _annotated_members(tp, instance, path)
    return [m for m in members if not m.attr.startswith("_")]


def type_hints(tp: type) -> Dict[str, Any]:
    """
    Resolved annotations of a class (with `Annotated` extras kept).

    When the class as a whole cannot be resolved (an unknown forward
    reference), each member is resolved on its own; only the members that
    still fail keep their raw annotation, which then derives as open.
    """
    try:
        return get_type_hints(tp, include_extras=True)
    except (NameError, TypeError) as e:
        logger.debug("Could not resolve annotations of %s (%s); resolving members one by one", tp.__qualname__, e)

    hints: Dict[str, Any] = {}
    for klass in reversed(tp.__mro__):
        if klass is object:
            continue
        for name, annotation in (getattr(klass, "__annotations__", {}) or {}).items():
            hints[name] = _resolve_member(klass, name, annotation)
    return hints


def _resolve_member(owner: type, name: str, annotation: Any) -> Any:
    """
    Resolve one annotation the way `get_type_hints` resolves it for the
    declaring class: module names first, then the class namespace.
    """
    module_ns = getattr(sys.modules.get(owner.__module__), "__dict__", {})
    single = type(owner.__name__, (), {"__annotations__": {name: annotation}, "__module__": owner.__module__})
    try:
        return get_type_hints(single, globalns=dict(vars(owner)), localns=module_ns, include_extras=True)[name]
    except (NameError, TypeError) as e:
        logger.debug("Could not resolve %s.%s (%s); treating it as open", owner.__qualname__, name, e)
        return annotation


def _dataclass_members(tp: type, instance: Any, path: str) -> List[Member]:
    hints = type_hints(tp)
    members = []
    for f in dataclasses.fields(tp):
        member_path = _join(path, f.name)
        base, extras = peel(hints.get(f.name, f.type))
        tags = Tags.collect(extras).merged(Tags.from_mapping(f.metadata, path=member_path))
        members.append(Member(f.name, base, tags, _attr(instance, f.name)))
    return members


def _model_members(tp: type[BaseModel], instance: Any, path: str) -> List[Member]:
    members = []
    for name, info in tp.model_fields.items():
        member_path = _join(path, name)
        base, extras = peel(info.annotation)
        native: Dict[str, Any] = {}
        alias = info.serialization_alias or info.alias
        if alias:
            native["json"] = alias
        if info.description is not None:
            native["description"] = info.description
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        tags = (
            Tags.from_mapping(native, path=member_path)
            .merged(Tags.collect((*extras, *info.metadata)))
            .merged(Tags.from_mapping(extra, path=member_path))
        )
        if info.exclude is True:
            tags = tags.merged(Tags(name="-"))
        members.append(Member(name, base, tags, _attr(instance, name)))
    return members


def _annotated_members(tp: type, instance: Any, path: str) -> List[Member]:
    """NamedTuple / TypedDict members, annotated via `Annotated[T, Tags(...)]` only."""
    members = []
    for name, hint in type_hints(tp).items():
        base, extras = peel(hint)
        value = instance.get(name) if isinstance(instance, dict) else _attr(instance, name)
        members.append(Member(name, base, Tags.collect(extras), value))
    return members


def _attr(instance: Any, name: str) -> Any:
    return getattr(instance, name, None) if instance is not None else None


def _join(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name

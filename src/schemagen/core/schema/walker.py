#!/usr/bin/env python3
"""
Purpose:
    Implements the type walker: the recursive derivation of a SchemaNode tree
    from a Python type (plus an optional runtime value and member tags).

Dispatch order (first match wins, after peeling Annotated/Optional):
    timestamp → bytes → struct → sequence → mapping → open → enumeration → primitive
Anything unrecognized degrades to an unconstrained node.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from schemagen.core.constants import WILDCARD_PROPERTY
from schemagen.core.errors import RecursiveTypeError
from schemagen.core.log import get_logger
from schemagen.core.schema.introspect import (
    TypeCategory,
    classify,
    enumeration_values,
    is_open,
    mapping_value,
    peel,
    sequence_element,
    struct_members,
)
from schemagen.core.schema.kind import SchemaKind
from schemagen.core.schema.node import SchemaNode
from schemagen.core.schema.tags import Tags

logger = get_logger(__name__)


# --- Walker --- #

class TypeWalker:
    """
    Derives SchemaNode trees from types.

    A walker tracks the structs on the current derivation path so a
    self-referential type fails with `RecursiveTypeError` instead of
    exhausting the stack. A struct reached with a runtime value is keyed by
    that value's identity too: a finite value tree through open members
    derives normally, only a reference cycle fails. Use one walker per
    derivation.
    """

    def __init__(self) -> None:
        self._active: List[Tuple[type, Optional[int]]] = []

    def derive(self, tp: Any, value: Any = None, tags: Optional[Tags] = None, *, path: str = "") -> SchemaNode:
        """
        Derive the node for `tp`.

        Args:
            tp: Any type form (class, `list[str]`, `Optional[T]`, `Annotated[...]`, ...).
            value: Runtime value held at this position, if known. Only consulted
                when `tp` is open, to derive from `type(value)` instead.
            tags: Member annotations; override any `Annotated` tags on `tp`.
            path: Dotted location used in log and error messages.

        Raises:
            InvalidTagError: on malformed annotations.
            RecursiveTypeError: if a struct type contains itself.
        """
        base, extras = peel(tp)
        tags = Tags.collect(extras).merged(tags)
        category = classify(base)

        if category is TypeCategory.OPEN and value is not None and not is_open(type(value)):
            return self.derive(type(value), value, tags, path=path)

        attrs = self._shape(base, category, value, path)
        attrs.update(tags.node_constraints(attrs["kind"], path=path or None))
        return SchemaNode(**attrs)

    # --- Dispatch --- #

    def _shape(self, base: Any, category: TypeCategory, value: Any, path: str) -> Dict[str, Any]:
        if category is TypeCategory.TIMESTAMP:
            return {"kind": SchemaKind.STRING, "format": "date-time"}
        if category is TypeCategory.BYTES:
            return {"kind": SchemaKind.STRING}
        if category is TypeCategory.STRUCT:
            return self._struct(base, value, path)
        if category is TypeCategory.SEQUENCE:
            return self._sequence(base, path)
        if category is TypeCategory.MAPPING:
            return self._mapping(base, path)
        if category is TypeCategory.OPEN:
            return {"kind": SchemaKind.UNCONSTRAINED}
        if category is TypeCategory.ENUMERATION:
            return self._enumeration(base)
        if category is TypeCategory.PRIMITIVE:
            return {"kind": SchemaKind.from_python_type(base)}
        logger.debug("No schema mapping for %r at %s; leaving it unconstrained", base, path or "<root>")
        return {"kind": SchemaKind.UNCONSTRAINED}

    # --- Categories --- #

    def _struct(self, tp: type, value: Any, path: str) -> Dict[str, Any]:
        prefix = path or tp.__qualname__
        key = (tp, None if value is None else id(value))
        if key in self._active:
            raise RecursiveTypeError(f"unsupported recursive type {tp.__qualname__!r}", path=prefix)

        self._active.append(key)
        try:
            properties: Dict[str, SchemaNode] = {}
            required: List[str] = []
            for member in struct_members(tp, value, path=prefix):
                member_path = f"{prefix}.{member.attr}"
                if member.is_excluded:
                    logger.debug("Excluding member %s", member_path)
                    continue
                name = member.external_name
                properties[name] = self.derive(member.type, member.value, member.tags, path=member_path)
                if member.tags.is_required and name not in required:
                    required.append(name)
        finally:
            self._active.pop()

        return {"kind": SchemaKind.OBJECT, "properties": properties, "required": required}

    def _sequence(self, tp: Any, path: str) -> Dict[str, Any]:
        attrs: Dict[str, Any] = {"kind": SchemaKind.ARRAY}
        element = sequence_element(tp)
        if not is_open(element):
            attrs["items"] = self.derive(element, path=f"{path}[]")
        return attrs

    def _mapping(self, tp: Any, path: str) -> Dict[str, Any]:
        value_type = mapping_value(tp)
        if is_open(value_type):
            return {"kind": SchemaKind.OBJECT, "additional_properties": True}
        return {
            "kind": SchemaKind.OBJECT,
            "properties": {WILDCARD_PROPERTY: self.derive(value_type, path=f"{path}[{WILDCARD_PROPERTY}]")},
            "additional_properties": False,
        }

    @staticmethod
    def _enumeration(tp: Any) -> Dict[str, Any]:
        values = enumeration_values(tp)
        if values and all(isinstance(v, str) for v in values):
            return {"kind": SchemaKind.STRING, "enum": list(values)}
        if values and all(isinstance(v, bool) for v in values):
            return {"kind": SchemaKind.BOOLEAN}
        if values and all(isinstance(v, int) and not isinstance(v, bool) for v in values):
            return {"kind": SchemaKind.INTEGER}
        logger.debug("Enumeration %r has mixed value types; leaving it unconstrained", tp)
        return {"kind": SchemaKind.UNCONSTRAINED}


# --- Public API --- #

def derive(tp: Any, value: Any = None, tags: Optional[Tags] = None) -> SchemaNode:
    """Derive the schema node for `tp` with a fresh walker."""
    return TypeWalker().derive(tp, value, tags)

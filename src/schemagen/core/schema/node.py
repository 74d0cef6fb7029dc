#!/usr/bin/env python3
"""
Purpose:
    Implements the SchemaNode model: one point in a derived JSON Schema tree,
    holding a kind plus the constraint attributes that kind admits, and
    serializing itself as an ordered flat mapping.
"""
from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator

from schemagen.core.schema.kind import SchemaKind


# --- Kind-gated attributes --- #
# Attribute names (python side) that are only meaningful for a given kind.
STRING_ONLY: Tuple[str, ...] = ("format", "pattern", "min_length", "max_length", "enum")
NUMERIC_ONLY: Tuple[str, ...] = ("minimum", "maximum", "exclusive_minimum", "exclusive_maximum")
OBJECT_ONLY: Tuple[str, ...] = ("properties", "required", "additional_properties")
ARRAY_ONLY: Tuple[str, ...] = ("items",)

# Render order for the scalar attributes that follow type/properties/required/items
RENDER_KEYS: Tuple[Tuple[str, str], ...] = (
    ("additional_properties", "additionalProperties"),
    ("description", "description"),
    ("format", "format"),
    ("pattern", "pattern"),
    ("min_length", "minLength"),
    ("max_length", "maxLength"),
    ("minimum", "minimum"),
    ("maximum", "maximum"),
    ("exclusive_minimum", "exclusiveMinimum"),
    ("exclusive_maximum", "exclusiveMaximum"),
    ("const", "const"),
    ("enum", "enum"),
)


# --- Model --- #

class SchemaNode(BaseModel):
    """
    One node of a derived schema tree.

    Every attribute except `kind` is optional; `None` means absent and is
    never rendered. Exactly one concrete kind is active per node, or the node
    is `SchemaKind.UNCONSTRAINED` (rendered without `type`).

    Kind gating:
      - string:          format, pattern, minLength, maxLength, enum
      - integer/number:  minimum, maximum, exclusiveMinimum, exclusiveMaximum
      - array:           items
      - object:          properties, required, additionalProperties
      - any kind:        description
      - scalar kinds:    const (typed to match the kind)
    """

    model_config = ConfigDict(extra="forbid")

    kind: SchemaKind = Field(default=SchemaKind.UNCONSTRAINED, description="Schema-level type category.")

    # Composite
    properties: Optional[Dict[str, SchemaNode]] = Field(default=None, description="Object members by external name.")
    required: Optional[List[str]] = Field(default=None, description="Names of required members, in declaration order.")
    items: Optional[SchemaNode] = Field(default=None, description="Array element schema.")
    additional_properties: Optional[bool] = Field(default=None, description="Map marker: False for uniform values, True for open values.")

    # Annotation-driven
    description: Optional[str] = None
    format: Optional[str] = None
    pattern: Optional[str] = None
    min_length: Optional[int] = Field(default=None, ge=0)
    max_length: Optional[int] = Field(default=None, ge=0)
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    exclusive_minimum: Optional[float] = None
    exclusive_maximum: Optional[float] = None
    const: Optional[Any] = None
    enum: Optional[List[str]] = None

    # --- Validators --- #

    @model_validator(mode="after")
    def _post(self) -> "SchemaNode":
        """
        Final validation:
        - empty properties/required collapse to absent
        - constraint attributes must match the node's kind
        - required names must be declared properties
        - numeric bounds must be finite
        - const must be typed per the node's kind
        """
        self._collapse_empty()
        self._ensure_kind_gating()
        self._ensure_required_declared()
        self._ensure_finite_bounds()
        self._ensure_const_matches_kind()
        return self

    # --- Serializer: ordered flat mapping --- #

    @model_serializer(mode="plain")
    def _dump_ordered(self) -> Dict[str, Any]:
        """
        Emit the populated attributes in fixed render order:
        type, properties, required, items, additionalProperties, description,
        format, pattern, minLength, maxLength, minimum, maximum,
        exclusiveMinimum, exclusiveMaximum, const, enum.
        """
        out: Dict[str, Any] = {}
        if self.kind.type_name is not None:
            out["type"] = self.kind.type_name
        if self.properties:
            out["properties"] = {name: child._dump_ordered() for name, child in self.properties.items()}
        if self.required:
            out["required"] = list(self.required)
        if self.items is not None:
            out["items"] = self.items._dump_ordered()
        for attr, key in RENDER_KEYS:
            value = getattr(self, attr)
            if value is None:
                continue
            if attr in NUMERIC_ONLY or (attr == "const" and self.kind is SchemaKind.NUMBER):
                value = _render_number(value)
            elif attr == "enum":
                value = list(value)
            out[key] = value
        return out

    # --- Convenience --- #

    def is_unconstrained(self) -> bool:
        """True if the node carries no type restriction."""
        return self.kind is SchemaKind.UNCONSTRAINED

    def property_names(self) -> List[str]:
        """External names of object members (empty for non-objects)."""
        return list(self.properties or {})

    # --- Post Helpers --- #

    def _collapse_empty(self) -> None:
        if self.properties is not None and not self.properties:
            self.properties = None
        if self.required is not None and not self.required:
            self.required = None

    def _ensure_kind_gating(self) -> None:
        gates = (
            (STRING_ONLY, self.kind.is_string()),
            (NUMERIC_ONLY, self.kind.is_numeric()),
            (OBJECT_ONLY, self.kind is SchemaKind.OBJECT),
            (ARRAY_ONLY, self.kind is SchemaKind.ARRAY),
        )
        for attrs, allowed in gates:
            if allowed:
                continue
            stray = [a for a in attrs if getattr(self, a) is not None]
            if stray:
                raise ValueError(f"Attribute(s) {stray} do not apply to a {self.kind.value!r} node")

    def _ensure_required_declared(self) -> None:
        if not self.required:
            return
        declared = set(self.properties or {})
        missing = [name for name in self.required if name not in declared]
        if missing:
            raise ValueError(f"Required name(s) {missing} are not declared properties")

    def _ensure_finite_bounds(self) -> None:
        for attr in NUMERIC_ONLY:
            value = getattr(self, attr)
            if value is not None and not math.isfinite(value):
                raise ValueError(f"{attr!r} must be a finite number, got {value!r}")

    def _ensure_const_matches_kind(self) -> None:
        if self.const is None:
            return
        if not _const_matches(self.kind, self.const):
            raise ValueError(
                f"'const' value {self.const!r} does not match a {self.kind.value!r} node"
            )


# --- Internals --- #

def _const_matches(kind: SchemaKind, value: Any) -> bool:
    if kind is SchemaKind.STRING:
        return isinstance(value, str)
    if kind is SchemaKind.BOOLEAN:
        return isinstance(value, bool)
    if kind is SchemaKind.INTEGER:
        return isinstance(value, int) and not isinstance(value, bool)
    if kind is SchemaKind.NUMBER:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return False


def _render_number(value: float) -> int | float:
    """Integral floats render as integers (`42`, not `42.0`)."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


SchemaNode.model_rebuild()

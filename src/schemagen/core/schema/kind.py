#!/usr/bin/env python3
"""
Purpose:
    Defines the SchemaKind enumeration for derived JSON Schema nodes, along
    with helpers for parsing, primitive type mapping, and introspection of
    which constraint families a kind accepts.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any


class SchemaKind(str, Enum):
    """
    Schema-level type categories.

    - boolean       : true/false scalar
    - integer       : whole-number scalar (any int width)
    - number        : floating-point scalar
    - string        : text (also raw bytes and timestamps)
    - array         : sequence, optional element schema in `items`
    - object        : struct or associative map
    - unconstrained : no type restriction; renders without a `type` key
    """

    BOOLEAN = "boolean"
    INTEGER = "integer"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"
    UNCONSTRAINED = "unconstrained"

    # --- Parsing helpers --- #

    @classmethod
    def parse(cls, value: str | SchemaKind | None) -> SchemaKind:
        """
        Coerce arbitrary input to a `SchemaKind`.

        - `SchemaKind` instance → returned as-is
        - `None`, empty, or unknown strings → `SchemaKind.UNCONSTRAINED`
        - strings are trimmed and lowercased before lookup

        Examples
        --------
        >>> SchemaKind.parse(" Integer ")
        <SchemaKind.INTEGER: 'integer'>
        >>> SchemaKind.parse(None)
        <SchemaKind.UNCONSTRAINED: 'unconstrained'>
        """
        if isinstance(value, SchemaKind):
            return value
        if value is None:
            return cls.UNCONSTRAINED
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.UNCONSTRAINED

    @classmethod
    def from_python_type(cls, t: Any) -> SchemaKind:
        """
        Map a primitive Python class to its kind.

        `bool` is checked before `int` since it subclasses it. Non-primitive
        or non-class inputs map to `SchemaKind.UNCONSTRAINED`.
        """
        if not isinstance(t, type):
            return cls.UNCONSTRAINED
        if issubclass(t, bool):
            return cls.BOOLEAN
        if issubclass(t, int):
            return cls.INTEGER
        if issubclass(t, (float, Decimal)):
            return cls.NUMBER
        if issubclass(t, str):
            return cls.STRING
        return cls.UNCONSTRAINED

    # --- Introspection helpers --- #

    @property
    def type_name(self) -> str | None:
        """Value emitted under `type`, or None for unconstrained nodes."""
        return None if self is SchemaKind.UNCONSTRAINED else self.value

    def is_scalar(self) -> bool:
        """True for boolean, integer, number and string."""
        return self in {SchemaKind.BOOLEAN, SchemaKind.INTEGER, SchemaKind.NUMBER, SchemaKind.STRING}

    def is_numeric(self) -> bool:
        """True if numeric bounds (minimum/maximum/exclusive*) apply."""
        return self in {SchemaKind.INTEGER, SchemaKind.NUMBER}

    def is_string(self) -> bool:
        """True if string constraints (pattern/length/enum) apply."""
        return self is SchemaKind.STRING

    def is_container(self) -> bool:
        """True for array and object."""
        return self in {SchemaKind.ARRAY, SchemaKind.OBJECT}

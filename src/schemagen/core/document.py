#!/usr/bin/env python3
"""
Purpose:
    Defines the Document model: the `$schema` identifier plus one root
    SchemaNode, populated from any value or type and rendered as indented
    JSON (or YAML).
"""

from __future__ import annotations

import json
from typing import Any, ClassVar, Dict, ForwardRef, TypeVar, get_origin

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_serializer

from schemagen.core.constants import DEFAULT_INDENT, SCHEMA_URI
from schemagen.core.schema.introspect import is_newtype
from schemagen.core.schema.node import SchemaNode
from schemagen.core.schema.walker import derive


# --- Model --- #

class Document(BaseModel):
    """
    A derived JSON Schema document.

    Lifecycle: created empty, populated by `read()` (each call overwrites the
    root), rendered any number of times.

    Example
    -------
    >>> print(Document().read(True))
    {
        "$schema": "http://json-schema.org/schema#",
        "type": "boolean"
    }
    """

    model_config = ConfigDict(extra="forbid")

    schema_uri: ClassVar[str] = SCHEMA_URI

    root_node: SchemaNode = Field(default_factory=SchemaNode, description="Root of the derived schema tree.")

    # --- Population --- #

    def read(self, value: Any) -> "Document":
        """
        Populate the root node from `value`.

        `value` may be a type form (a class, `list[str]`, `Optional[int]`,
        `Any`, ...) or an ordinary runtime value, in which case its runtime
        type is derived with the value as context. Returns `self`.
        """
        if is_type_form(value):
            self.root_node = derive(value)
        else:
            self.root_node = derive(type(value), value)
        return self

    @classmethod
    def from_type(cls, tp: Any) -> "Document":
        """Build and populate a Document in one step."""
        return cls().read(tp)

    # --- Serializer: identifier + flattened root --- #

    @model_serializer(mode="plain")
    def _dump_flat(self) -> Dict[str, Any]:
        return {"$schema": self.schema_uri, **self.root_node._dump_ordered()}

    # --- Rendering --- #

    def to_dict(self) -> Dict[str, Any]:
        """Ordered mapping: `$schema` first, then the root's populated attributes."""
        return self._dump_flat()

    def render(self, indent: int = DEFAULT_INDENT) -> str:
        """Render as indented JSON text (no trailing newline)."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def render_yaml(self) -> str:
        """Render the same ordered mapping as YAML."""
        return yaml.safe_dump(self.to_dict(), sort_keys=False, allow_unicode=True)

    def __str__(self) -> str:
        return self.render()


# --- Helpers --- #

def is_type_form(value: Any) -> bool:
    """True for classes and typing constructs, False for ordinary values."""
    if isinstance(value, (type, TypeVar, ForwardRef)):
        return True
    if value is Any or is_newtype(value):
        return True
    return get_origin(value) is not None


def generate(value: Any, indent: int = DEFAULT_INDENT) -> str:
    """Derive and render the document for `value` in one call."""
    return Document().read(value).render(indent=indent)

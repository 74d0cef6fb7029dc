#!/usr/bin/env python3
"""
Purpose:
    Defines the Tags model: the immutable set of per-member annotations
    (serialization name, required flag, description and constraint text)
    recognized by the type walker, plus the parsers for their numeric, enum
    and const sub-grammars.

Tags can be attached three ways:
    - `Annotated[T, Tags(minLength=3)]` on any type
    - dataclass `field(metadata={"json": "name", "required": "true"})`,
      overriding `Annotated` tags
    - pydantic `Field(alias=..., description=..., json_schema_extra={...})`;
      `json_schema_extra` overrides `Annotated` tags, which override the
      native alias and description
"""

from __future__ import annotations

import dataclasses
import math
from typing import Annotated, Any, Dict, Iterable, List, Mapping, Optional

from pydantic import BeforeValidator, ConfigDict, Field, ValidationError, field_validator
from pydantic.dataclasses import dataclass

from schemagen.core import constants as C
from schemagen.core.errors import InvalidTagError
from schemagen.core.formatting import join_validation_errors
from schemagen.core.log import get_logger
from schemagen.core.schema.kind import SchemaKind

logger = get_logger(__name__)


# --- Normalizers --- #

def _normalize_tag_text(v: Any) -> Optional[str]:
    """
    Normalize a raw tag value to text:
    - None and empty text stay unset (None)
    - bools → "true"/"false"
    - lists/tuples → joined with the enum separator
    - anything else → str(v)
    """
    if v is None or (isinstance(v, str) and not v):
        return None
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, (list, tuple)):
        return C.ENUM_SEPARATOR.join(str(x) for x in v)
    return str(v)


TagText = Annotated[Optional[str], BeforeValidator(_normalize_tag_text)]


# --- Sub-grammar parsers --- #

def parse_length(text: str) -> int:
    """Parse a `minLength`/`maxLength` tag (non-negative integer text)."""
    try:
        value = int(text.strip())
    except ValueError:
        raise ValueError(f"expected an integer, got {text!r}") from None
    if value < 0:
        raise ValueError(f"expected a non-negative integer, got {text!r}")
    return value


def parse_number(text: str) -> float:
    """Parse a numeric bound tag (`min`, `max`, `exclusiveMin`, `exclusiveMax`)."""
    try:
        value = float(text.strip())
    except ValueError:
        raise ValueError(f"expected a number, got {text!r}") from None
    if not math.isfinite(value):
        raise ValueError(f"expected a finite number, got {text!r}")
    return value


def parse_enum(text: str) -> List[str]:
    """Split an `enum` tag on `|`, preserving order."""
    return text.split(C.ENUM_SEPARATOR)


def parse_const(text: str, kind: SchemaKind) -> Any:
    """
    Coerce a `const` tag to the node's kind.

    Returns None when the kind takes no const (array/object/unconstrained).

    Raises:
        ValueError: if the text is not a literal of the kind.
    """
    if kind is SchemaKind.STRING:
        return text
    if kind is SchemaKind.INTEGER:
        try:
            return int(text.strip())
        except ValueError:
            raise ValueError(f"expected an integer literal, got {text!r}") from None
    if kind is SchemaKind.NUMBER:
        return parse_number(text)
    if kind is SchemaKind.BOOLEAN:
        lowered = text.strip().lower()
        if lowered not in {"true", "false"}:
            raise ValueError(f"expected 'true' or 'false', got {text!r}")
        return lowered == "true"
    return None


# --- Model --- #

@dataclass(frozen=True, config=ConfigDict(extra="forbid", populate_by_name=True))
class Tags:
    """
    Annotations recognized on one struct member.

    Populated either by python name (`min_length=3`) or by the raw
    vocabulary key (`minLength="3"`). Values are kept as raw text; numeric
    text is checked on construction so malformed bounds fail early with a
    pydantic `ValidationError`.

    Example
    -------
    >>> t = Tags(json="name,omitempty", required=True, minLength=3)
    >>> t.serialization_name, t.is_required, t.min_length
    ('name', True, '3')
    """

    name: TagText = Field(default=None, alias="json", description="Serialization name; '-' excludes the member.")
    required: TagText = Field(default=None, description="'true' marks the member required.")
    description: TagText = None
    pattern: TagText = None
    min_length: TagText = Field(default=None, alias="minLength")
    max_length: TagText = Field(default=None, alias="maxLength")
    minimum: TagText = Field(default=None, alias="min")
    maximum: TagText = Field(default=None, alias="max")
    exclusive_minimum: TagText = Field(default=None, alias="exclusiveMin")
    exclusive_maximum: TagText = Field(default=None, alias="exclusiveMax")
    const: TagText = None
    enum: TagText = None

    # --- Validators --- #

    @field_validator("min_length", "max_length")
    @classmethod
    def _check_length_text(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            parse_length(v)
        return v

    @field_validator("minimum", "maximum", "exclusive_minimum", "exclusive_maximum")
    @classmethod
    def _check_number_text(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            parse_number(v)
        return v

    # --- Construction --- #

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, path: Optional[str] = None) -> "Tags":
        """
        Build Tags from a raw metadata mapping.

        Only vocabulary keys (`json`, `minLength`, ...) are read; anything
        else, python attribute names included, belongs to other libraries
        sharing the mapping and is ignored.

        Raises:
            InvalidTagError: if a recognized key holds malformed text.
        """
        known = {k: v for k, v in data.items() if k in C.TAG_KEYS}
        try:
            return cls(**known)
        except ValidationError as e:
            raise InvalidTagError(join_validation_errors(e), path=path) from e

    @classmethod
    def collect(cls, extras: Iterable[Any]) -> "Tags":
        """Merge every Tags instance found in `Annotated` metadata, in order."""
        result = cls()
        for extra in extras:
            if isinstance(extra, Tags):
                result = result.merged(extra)
        return result

    def merged(self, other: Optional["Tags"]) -> "Tags":
        """Return a copy where every value set on `other` overrides this one."""
        if other is None or other.is_empty():
            return self
        return type(self)(**{**self.values(), **other.values()})

    def values(self) -> Dict[str, str]:
        """Set tags by python name (unset tags omitted)."""
        return {
            f.name: getattr(self, f.name)
            for f in dataclasses.fields(self)
            if getattr(self, f.name) is not None
        }

    # --- Accessors --- #

    @property
    def serialization_name(self) -> Optional[str]:
        """First comma-free segment of the `json` tag, or None if blank."""
        if self.name is None:
            return None
        head = self.name.split(C.NAME_OPTION_SEPARATOR, 1)[0].strip()
        return head or None

    @property
    def is_excluded(self) -> bool:
        return self.serialization_name == C.EXCLUDE_SENTINEL

    @property
    def is_required(self) -> bool:
        return self.required is not None and self.required.strip().lower() == C.REQUIRED_TRUE

    def is_empty(self) -> bool:
        return not self.values()

    # --- Overlay --- #

    def node_constraints(self, kind: SchemaKind, *, path: Optional[str] = None) -> Dict[str, Any]:
        """
        Parse the constraint tags that apply to `kind` into SchemaNode attributes.

        Tags for a different kind are skipped (logged at DEBUG), never errors.

        Raises:
            InvalidTagError: if `const` cannot be coerced to `kind`.
        """
        attrs: Dict[str, Any] = {}
        if self.description is not None:
            attrs["description"] = self.description

        string_tags = {
            "pattern": self.pattern,
            "min_length": self.min_length,
            "max_length": self.max_length,
            "enum": self.enum,
        }
        numeric_tags = {
            "minimum": self.minimum,
            "maximum": self.maximum,
            "exclusive_minimum": self.exclusive_minimum,
            "exclusive_maximum": self.exclusive_maximum,
        }

        if kind.is_string():
            if self.pattern is not None:
                attrs["pattern"] = self.pattern
            if self.min_length is not None:
                attrs["min_length"] = parse_length(self.min_length)
            if self.max_length is not None:
                attrs["max_length"] = parse_length(self.max_length)
            if self.enum is not None:
                attrs["enum"] = parse_enum(self.enum)
        else:
            self._log_skipped(string_tags, kind, path)

        if kind.is_numeric():
            for attr, text in numeric_tags.items():
                if text is not None:
                    attrs[attr] = parse_number(text)
        else:
            self._log_skipped(numeric_tags, kind, path)

        if self.const is not None:
            try:
                const = parse_const(self.const, kind)
            except ValueError as e:
                raise InvalidTagError(f"const: {e}", path=path) from e
            if const is None:
                self._log_skipped({"const": self.const}, kind, path)
            else:
                attrs["const"] = const

        return attrs

    @staticmethod
    def _log_skipped(tags: Mapping[str, Optional[str]], kind: SchemaKind, path: Optional[str]) -> None:
        skipped = sorted(k for k, v in tags.items() if v is not None)
        if skipped:
            logger.debug("Ignoring %s on %s node at %s", skipped, kind.value, path or "<root>")

#!/usr/bin/env python3
"""
Core constants used across schemagen.

- Document identity: the fixed `$schema` identifier emitted on every document.
- Annotation vocabulary: recognized tag keys and their sub-grammar separators.
- Rendering: default indentation and text encoding.
"""

import re
from typing import Final

# --- Document constants --- #

# Schema identifier emitted as `$schema` on every rendered document
SCHEMA_URI: Final[str] = "http://json-schema.org/schema#"

# Synthetic property key marking "every value of this map shares one schema"
WILDCARD_PROPERTY: Final[str] = ".*"


# --- Annotation vocabulary --- #

# Raw tag keys recognized on a struct member
TAG_KEYS: Final[frozenset[str]] = frozenset({
    "json",
    "required",
    "description",
    "minLength",
    "maxLength",
    "pattern",
    "min",
    "max",
    "exclusiveMin",
    "exclusiveMax",
    "const",
    "enum",
})

# Serialization name that removes a member from the derived object
EXCLUDE_SENTINEL: Final[str] = "-"

# Separator between allowed values in an `enum` tag
ENUM_SEPARATOR: Final[str] = "|"

# Separator between the name and options of a `json` tag
NAME_OPTION_SEPARATOR: Final[str] = ","

# Literal text of a true `required` tag
REQUIRED_TRUE: Final[str] = "true"


# --- Rendering --- #

DEFAULT_INDENT: Final[int] = 4

DEFAULT_TEXT_ENCODING: Final[str] = "utf-8"

SUPPORTED_OUTPUT_FORMATS: Final[frozenset[str]] = frozenset({"json", "yaml"})


# --- Regular Expressions --- #
# Matches an importable target of the form `package.module:Attribute.Nested`
IMPORT_TARGET_RE: re.Pattern[str] = re.compile(
    r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*:[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$"
)


# --- Runtime guard --- #
def validate_constants():
    """
    Ensure constants are valid at runtime.
    """
    if ENUM_SEPARATOR == NAME_OPTION_SEPARATOR:
        raise RuntimeError("ENUM_SEPARATOR and NAME_OPTION_SEPARATOR must differ")
    if DEFAULT_INDENT < 0:
        raise RuntimeError(f"DEFAULT_INDENT must be non-negative, got {DEFAULT_INDENT!r}")

validate_constants()

#!/usr/bin/env python3
"""
Purpose:
    Exception hierarchy for schemagen.

    Derivation itself has no failure outcome: every type yields a node. The
    exceptions here signal programmer misuse (malformed annotations) and the
    one fatal condition the walker guards against (recursive types).
"""

from __future__ import annotations

from typing import Optional


class SchemaGenError(Exception):
    """
    Base exception for schemagen.

    Args:
        message: Human-readable description of the problem.
        path: Optional dotted location of the offending member (e.g. `Order.items.sku`).
    """

    def __init__(self, message: str, *, path: Optional[str] = None) -> None:
        self.message = message
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class InvalidTagError(SchemaGenError, ValueError):
    """
    Raised when a member annotation cannot be parsed.

    Examples:
    - `minLength="three"` (not an integer)
    - `min="nan"` (not a finite number)
    - `const="4.5"` on an integer member
    """


class RecursiveTypeError(SchemaGenError, TypeError):
    """
    Raised when a struct type is re-entered on the current derivation path.

    Self-referential type graphs have no finite schema tree without `$ref`,
    which this library does not emit.
    """

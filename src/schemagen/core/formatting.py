#!/usr/bin/env python3
"""
Formatting helpers for schemagen.

- Compact one-line messages for pydantic `ValidationError`s raised while
  building tags and schema nodes, keyed by the offending tag or attribute.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Mapping

# Prefixes pydantic puts in front of messages raised from custom validators
_VALIDATOR_PREFIXES = ("Value error, ", "Assertion failed, ")


# --- Public API --- #

def format_validation_errors(exc: Exception) -> List[str]:
    """
    One `location: message` line per error in a pydantic ValidationError.

    Example:
        minLength: expected an integer, got 'three'

    Exceptions without an `errors()` method yield the first line of `str(exc)`.
    """
    errors_fn = getattr(exc, "errors", None)
    errors = errors_fn() if callable(errors_fn) else None
    if not errors:
        return [str(exc).splitlines()[0]]
    return [_format_error(err) for err in errors]


def join_validation_errors(exc: Exception) -> str:
    """All messages of `exc` on one line, separated by `; `."""
    return "; ".join(format_validation_errors(exc))


# --- Internals --- #

def _format_error(err: Mapping[str, Any]) -> str:
    msg = str(err.get("msg", "Validation error"))
    for prefix in _VALIDATOR_PREFIXES:
        if msg.startswith(prefix):
            msg = msg[len(prefix):]
            break
    return f"{_format_error_loc(err.get('loc', ()))}: {msg}"


def _format_error_loc(loc: Iterable[Any]) -> str:
    """
    Dotted path for a pydantic error `loc`; list indexes become `[i]` suffixes.

        ('properties', '.*', 'enum', 1) -> "properties..*.enum[1]"
        ()                              -> "<root>"
    """
    parts: List[str] = []
    for seg in loc:
        if isinstance(seg, int) and parts:
            parts[-1] += f"[{seg}]"
        elif isinstance(seg, int):
            parts.append(f"[{seg}]")
        else:
            parts.append(str(seg))
    return ".".join(parts) or "<root>"

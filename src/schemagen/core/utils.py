#!/usr/bin/env python3
"""
Purpose:
    Provides common utility functions such as dictionary merge, JSON file
    loading, and import-target resolution for schemagen.
"""

import importlib
import json
from pathlib import Path
from typing import Any, Dict

from schemagen.core.constants import DEFAULT_TEXT_ENCODING, IMPORT_TARGET_RE


# --- Validation Helpers --- #

def is_valid_import_target(target: str) -> bool:
    """Return True if the target looks like `package.module:Attribute`."""
    return bool(IMPORT_TARGET_RE.fullmatch(target))


# --- Generic Utilities --- #

def merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge two dictionaries (values from 'override' take precedence).
    Non-dict values are overwritten; dict values are merged depth-first.
    """
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = merge_dicts(result[k], v)
        else:
            result[k] = v
    return result


def import_object(target: str) -> Any:
    """
    Resolve `package.module:Attribute.Nested` to the named object.

    Raises:
        ValueError: if the target is malformed.
        ImportError: if the module cannot be imported.
        AttributeError: if the attribute path does not exist.
    """
    if not is_valid_import_target(target):
        raise ValueError(f"Invalid import target {target!r}; expected 'package.module:Attribute'")
    module_name, attr_path = target.split(":", 1)
    obj: Any = importlib.import_module(module_name)
    for part in attr_path.split("."):
        obj = getattr(obj, part)
    return obj


# --- File I/O Helpers --- #

def load_json_file(path: Path) -> Dict[str, Any]:
    """
    Load a JSON object (a config layer) from `path`; a missing file is an empty layer.

    Raises:
        ValueError: on invalid JSON, or a top-level value that is not an object.
    """
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding=DEFAULT_TEXT_ENCODING))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {str(path)!r}: {e.msg} (line {e.lineno}, col {e.colno})") from e
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {str(path)!r}, got {type(data).__name__}")
    return data


def write_text_file(path: Path, text: str) -> None:
    """Write text to 'path', creating parent directories and ending with a newline."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text if text.endswith("\n") else text + "\n", encoding=DEFAULT_TEXT_ENCODING)

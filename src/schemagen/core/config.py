#!/usr/bin/env python3
"""
schemagen configuration loader.
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Final

from schemagen.core.constants import DEFAULT_INDENT, SUPPORTED_OUTPUT_FORMATS
from schemagen.core.log import DEFAULT_LOG_LEVEL
from schemagen.core.utils import merge_dicts, load_json_file

# --- Defaults & locations --- #

DEFAULT_CONFIG: Final[Dict[str, Any]] = {
    "indent": DEFAULT_INDENT,
    "format": "json",
    "logging": {"level": DEFAULT_LOG_LEVEL},
}

GLOBAL_CONFIG_PATH: Final[Path] = Path.home() / ".config" / "schemagen" / "config.json"

PROJECT_CONFIG_NAME: Final[str] = "schemagen.json"


# --- Public API --- #

def load_config() -> Dict[str, Any]:
    """
    Load schemagen configuration with layered precedence.

    Order:
        1. Built-in defaults
        2. Global config (~/.config/schemagen/config.json)
        3. Project config (./schemagen.json)
        4. Environment overrides:
           - SCHEMAGEN_INDENT
           - SCHEMAGEN_FORMAT
           - SCHEMAGEN_LOG_LEVEL

    Returns:
        A merged configuration dictionary.

    Raises:
        ValueError: if a layer holds an invalid indent or output format.
    """
    # 1) start with defaults
    config = copy.deepcopy(DEFAULT_CONFIG)

    # 2) global config
    config = merge_dicts(config, load_json_file(GLOBAL_CONFIG_PATH))

    # 3) project config
    project_path = Path.cwd() / PROJECT_CONFIG_NAME
    config = merge_dicts(config, load_json_file(project_path))

    # 4) environment overrides
    indent_env = os.getenv("SCHEMAGEN_INDENT")
    if indent_env:
        config["indent"] = indent_env

    format_env = os.getenv("SCHEMAGEN_FORMAT")
    if format_env:
        config["format"] = format_env

    log_level_env = os.getenv("SCHEMAGEN_LOG_LEVEL")
    if log_level_env:
        config.setdefault("logging", {})["level"] = log_level_env

    config["indent"] = _parse_indent(config["indent"])
    config["format"] = _parse_format(config["format"])
    return config


# --- Internals --- #

def _parse_indent(value: Any) -> int:
    """Coerce an indent setting to a non-negative int."""
    try:
        indent = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid indent {value!r}; expected a non-negative integer") from None
    if indent < 0:
        raise ValueError(f"Invalid indent {value!r}; expected a non-negative integer")
    return indent


def _parse_format(value: Any) -> str:
    """Normalize an output format setting (json/yaml)."""
    fmt = str(value).strip().lower()
    if fmt not in SUPPORTED_OUTPUT_FORMATS:
        raise ValueError(f"Invalid format {value!r}; expected one of {sorted(SUPPORTED_OUTPUT_FORMATS)}")
    return fmt

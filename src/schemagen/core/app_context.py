#!/usr/bin/env python3
"""
Purpose:
    Wires together the schemagen application context: merged configuration
    and a logger configured from it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from schemagen.core.config import load_config
from schemagen.core.log import setup_logging


# --- Data model --- #

@dataclass(frozen=True)
class AppContext:
    """Immutable container for configuration and the configured logger."""
    config: Dict[str, Any]
    logger: logging.Logger

    @property
    def indent(self) -> int:
        return self.config["indent"]

    @property
    def output_format(self) -> str:
        return self.config["format"]


# --- Factory --- #

def build_context(*, config: Optional[Dict[str, Any]] = None) -> AppContext:
    """
    Build an `AppContext`.

    Args:
        config:
            Pre-merged configuration. If omitted, `load_config()` is used.

    Returns:
        AppContext: immutable bundle of config and the `schemagen` logger.
    """
    cfg = config or load_config()
    logger = setup_logging(cfg.get("logging", {}).get("level"))
    return AppContext(config=cfg, logger=logger)

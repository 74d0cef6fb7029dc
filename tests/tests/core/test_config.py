#!/usr/bin/env python3
import json
from pathlib import Path
import pytest

import schemagen.core.config as cfg


# --- Helpers --- #

def _write_json(path: Path, payload: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")


@pytest.fixture
def isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """No global or project config; no env vars."""
    monkeypatch.setattr(cfg, "GLOBAL_CONFIG_PATH", tmp_path / "no/such/config.json", raising=False)
    monkeypatch.chdir(tmp_path)
    for var in ("SCHEMAGEN_INDENT", "SCHEMAGEN_FORMAT", "SCHEMAGEN_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path


# --- load_config: defaults only --- #

def test_load_config_defaults_only(isolated):
    result = cfg.load_config()
    assert result == cfg.DEFAULT_CONFIG
    assert result == {"indent": 4, "format": "json", "logging": {"level": "WARNING"}}


# --- Precedence: global < project < env --- #

def test_load_config_global_and_project_precedence(isolated, monkeypatch):
    global_cfg = isolated / ".config/schemagen/config.json"
    project_dir = isolated / "proj"
    _write_json(global_cfg, {"logging": {"level": "DEBUG"}, "indent": 8, "extra": 1})
    _write_json(project_dir / cfg.PROJECT_CONFIG_NAME, {"logging": {"level": "INFO"}, "format": "YAML"})

    monkeypatch.setattr(cfg, "GLOBAL_CONFIG_PATH", global_cfg, raising=False)
    monkeypatch.chdir(project_dir)

    result = cfg.load_config()

    # Project overrides global
    assert result["logging"]["level"] == "INFO"
    # Values only in global propagate through
    assert result["indent"] == 8
    assert result["extra"] == 1
    # Format normalized to lowercase
    assert result["format"] == "yaml"


# --- Env overrides --- #

def test_load_config_env_overrides(isolated, monkeypatch):
    _write_json(isolated / cfg.PROJECT_CONFIG_NAME, {"indent": 8, "format": "yaml"})
    monkeypatch.setenv("SCHEMAGEN_INDENT", "2")
    monkeypatch.setenv("SCHEMAGEN_FORMAT", "json")
    monkeypatch.setenv("SCHEMAGEN_LOG_LEVEL", "DEBUG")

    result = cfg.load_config()

    assert result["indent"] == 2
    assert result["format"] == "json"
    assert result["logging"]["level"] == "DEBUG"


def test_env_override_does_not_leak_into_defaults(isolated, monkeypatch):
    monkeypatch.setenv("SCHEMAGEN_LOG_LEVEL", "DEBUG")
    cfg.load_config()
    assert cfg.DEFAULT_CONFIG["logging"]["level"] == "WARNING"


# --- Invalid values --- #

@pytest.mark.parametrize("indent", ["-1", "wide", "1.5"])
def test_invalid_indent_raises(isolated, monkeypatch, indent):
    monkeypatch.setenv("SCHEMAGEN_INDENT", indent)
    with pytest.raises(ValueError, match="indent"):
        cfg.load_config()


def test_invalid_format_raises(isolated):
    _write_json(isolated / cfg.PROJECT_CONFIG_NAME, {"format": "xml"})
    with pytest.raises(ValueError, match="format"):
        cfg.load_config()


def test_invalid_project_json_raises(isolated):
    (isolated / cfg.PROJECT_CONFIG_NAME).write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid JSON"):
        cfg.load_config()

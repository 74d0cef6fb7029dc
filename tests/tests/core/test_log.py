#!/usr/bin/env python3
import io
import logging

import pytest

from schemagen.core import log


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger(log.ROOT_LOGGER_NAME)
    level, handlers = root.level, list(root.handlers)
    yield
    root.setLevel(level)
    root.handlers[:] = handlers


@pytest.mark.parametrize("name,expected", [
    ("schemagen", "schemagen"),
    ("schemagen.core.walker", "schemagen.core.walker"),
    ("plugins.extra", "schemagen.plugins.extra"),
    ("schemagenx", "schemagen.schemagenx"),
])
def test_get_logger_stays_under_root(name, expected):
    assert log.get_logger(name).name == expected


@pytest.mark.parametrize("level,expected", [
    (None, logging.WARNING),
    ("debug", logging.DEBUG),
    (" INFO ", logging.INFO),
    (logging.ERROR, logging.ERROR),
])
def test_resolve_level(level, expected):
    assert log.resolve_level(level) == expected


def test_resolve_level_unknown_raises():
    with pytest.raises(ValueError, match="Unknown log level"):
        log.resolve_level("LOUD")


def test_setup_logging_writes_to_stream():
    stream = io.StringIO()
    root = log.setup_logging("DEBUG", stream=stream)
    log.get_logger("unit").debug("hello %s", "world")
    assert root.level == logging.DEBUG
    assert "hello world" in stream.getvalue()
    assert "schemagen.unit" in stream.getvalue()


def test_setup_logging_replaces_own_handler():
    log.setup_logging("INFO", stream=io.StringIO())
    root = log.setup_logging("INFO", stream=io.StringIO())
    own = [h for h in root.handlers if getattr(h, "_schemagen_handler", False)]
    assert len(own) == 1


def test_setup_logging_respects_level():
    stream = io.StringIO()
    log.setup_logging("WARNING", stream=stream)
    log.get_logger("unit").info("quiet")
    assert stream.getvalue() == ""

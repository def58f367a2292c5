"""Tests des utilitaires texte et de la configuration du logging."""

from __future__ import annotations

import logging

import pytest

from dualcues.core.utils.logging import parse_log_level, setup_logging
from dualcues.core.utils.text import normalize_whitespace, strip_markup


def test_normalize_whitespace():
    assert normalize_whitespace("  a \n\t b  ") == "a b"


def test_strip_markup():
    assert strip_markup("<i>Wait</i> <font color='red'>for</font> me!") == "Wait for me!"
    assert strip_markup("<v Ted>Hi</v>\nthere") == "Hi there"
    assert strip_markup("3 < 4") == "3 < 4"
    assert strip_markup("") == ""


@pytest.mark.parametrize(
    "name,expected",
    [("debug", logging.DEBUG), ("WARNING", logging.WARNING), ("15", 15), ("", logging.INFO), ("bogus", logging.INFO)],
)
def test_parse_log_level(name, expected):
    assert parse_log_level(name) == expected


def _own_handlers() -> list[logging.Handler]:
    return [h for h in logging.getLogger().handlers if getattr(h, "_dualcues", False)]


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in _own_handlers():
        root.removeHandler(handler)
        handler.close()
    root.setLevel(level)
    logging.getLogger("dualcues").setLevel(logging.NOTSET)


def test_setup_logging_writes_file(tmp_path, restore_root_logging):
    log_file = tmp_path / "logs" / "dualcues.log"
    logger = setup_logging(level=logging.DEBUG, log_file=log_file)
    assert logger.name == "dualcues"
    logging.getLogger("dualcues.core.align.engine").debug("alignement test")
    for handler in _own_handlers():
        handler.flush()
    content = log_file.read_text(encoding="utf-8")
    assert "[DEBUG] dualcues.core.align.engine: alignement test" in content


def test_setup_logging_keeps_third_party_at_root_level(tmp_path, restore_root_logging):
    log_file = tmp_path / "dualcues.log"
    setup_logging(level=logging.DEBUG, log_file=log_file)
    assert logging.getLogger().level == logging.WARNING
    logging.getLogger("rapidfuzz.fake").info("bruit tiers")
    logging.getLogger("rapidfuzz.fake").warning("alerte tierce")
    logging.getLogger("dualcues.cli").info("trace paquet")
    for handler in _own_handlers():
        handler.flush()
    content = log_file.read_text(encoding="utf-8")
    assert "bruit tiers" not in content
    assert "alerte tierce" in content
    assert "trace paquet" in content


def test_setup_logging_replaces_only_its_own_handlers(restore_root_logging):
    root = logging.getLogger()
    foreign = logging.NullHandler()
    root.addHandler(foreign)
    try:
        setup_logging()
        setup_logging()
        assert len(_own_handlers()) == 1
        assert foreign in root.handlers
    finally:
        root.removeHandler(foreign)

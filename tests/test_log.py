from __future__ import annotations

import logging

import pytest

from jobmate import log


@pytest.fixture
def restore_levels():
    root = logging.getLogger()
    saved = root.level, logging.getLogger("openai").level
    yield
    root.setLevel(saved[0])
    logging.getLogger("openai").setLevel(saved[1])


@pytest.mark.parametrize("value,expected", [
    ("debug", logging.DEBUG),
    (" WARNING ", logging.WARNING),
    ("nonsense", logging.INFO),
    (logging.ERROR, logging.ERROR),
])
def test_level_parsing(value, expected):
    assert log._level(value) == expected


def test_level_from_env(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "error")
    assert log._level(None) == logging.ERROR


@pytest.mark.parametrize("value,enabled", [("0", False), ("false", False), ("1", True), ("", True)])
def test_file_logging_switch(monkeypatch, value, enabled):
    monkeypatch.setenv("JOBMATE_LOG_FILE", value)
    assert log._file_logging_enabled() is enabled


def test_log_dir_override(monkeypatch, tmp_path):
    monkeypatch.setenv("JOBMATE_LOG_DIR", str(tmp_path))
    assert log._log_dir() == tmp_path
    monkeypatch.delenv("JOBMATE_LOG_DIR")
    assert log._log_dir() == log.DEFAULT_LOG_DIR


def test_configure_sets_level_and_quiets_clients(restore_levels):
    log.configure("DEBUG")
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("openai").level == logging.WARNING


def test_get_logger_returns_named_logger():
    assert log.get_logger("jobmate.test").name == "jobmate.test"

"""Logging setup shared by the jobmate package and run_jobmate.py.

Everything logs through ``get_logger(__name__)``. The first call installs a
stdout handler and, unless ``JOBMATE_LOG_FILE=0``, a daily file under
``logs/`` (or ``JOBMATE_LOG_DIR``). ``LOG_LEVEL`` sets the console level.
"""
from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"
# HTTP client chatter from the LLM call
_QUIET_LOGGERS = ("httpx", "httpcore", "openai")

_console: logging.Handler | None = None
_configured = False


def _level(value: str | int | None) -> int:
    if isinstance(value, int):
        return value
    name = (value or os.environ.get("LOG_LEVEL", "INFO")).strip().upper()
    return getattr(logging, name, logging.INFO)


def _file_logging_enabled() -> bool:
    return os.environ.get("JOBMATE_LOG_FILE", "1").strip().lower() not in ("0", "false", "no")


def _log_dir() -> Path:
    override = os.environ.get("JOBMATE_LOG_DIR", "").strip()
    return Path(override) if override else DEFAULT_LOG_DIR


def configure(level: str | int | None = None) -> None:
    """Install root handlers once; later calls only change the level."""
    global _configured, _console
    lvl = _level(level)

    root = logging.getLogger()
    root.setLevel(lvl)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(lvl, logging.WARNING))

    if _console is not None:
        _console.setLevel(lvl)
    _configured = True

    # Someone else (a test runner, an embedding app) owns the handlers
    if root.handlers:
        return

    _console = logging.StreamHandler(sys.stdout)
    _console.setLevel(lvl)
    _console.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FMT))
    root.addHandler(_console)

    if not _file_logging_enabled():
        return
    try:
        log_dir = _log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(
            log_dir / f"jobmate_{datetime.now().strftime('%Y-%m-%d')}.log", encoding="utf-8"
        )
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FMT))
        root.addHandler(fh)
    except OSError:
        pass


def get_logger(name: str) -> logging.Logger:
    """Return a named logger; configures root handlers on first call."""
    if not _configured:
        configure()
    return logging.getLogger(name)

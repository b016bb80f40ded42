"""Logging for ingestion runs.

Console output always goes to stdout, plus a per-day file under ``logs/`` (or
``$LOG_DIR``). With ``LOG_LEVEL=DEBUG`` the file also records skipped
duplicates and unparseable feed dates. Set ``LOG_TO_FILE=false`` to run
without the file, as the tests do.
"""
from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# chatty per-request loggers underneath requests
QUIET_LOGGERS = ("urllib3", "charset_normalizer")

_configured = False


def get_logger(name: str) -> logging.Logger:
    global _configured
    if not _configured:
        _configure()
        _configured = True
    return logging.getLogger(name)


def log_file_path(day: datetime | None = None) -> Path:
    """Daily file for fetch/parse/dedup detail of discovery runs."""
    base = Path(os.environ.get("LOG_DIR") or DEFAULT_LOG_DIR)
    return base / f"discovery_{(day or datetime.now()).strftime('%Y-%m-%d')}.log"


def _file_logging_enabled() -> bool:
    return os.environ.get("LOG_TO_FILE", "true").strip().lower() not in ("0", "false", "no", "off")


def _configure() -> None:
    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    # a host application or pytest owns the handlers
    if root.handlers:
        return

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(formatter)
    root.addHandler(console)

    if not _file_logging_enabled():
        return
    path = log_file_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(path, encoding="utf-8")
    except OSError:
        return
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(formatter)
    root.addHandler(fh)

"""
Logging configuration — the run log.

Called once at startup by main.py.  Every module that does
``logger = logging.getLogger(__name__)`` writes to both sinks:

    console   stdout, colored level tag, message only
    file      durable append-only log, timestamped and levelled

Console level precedence:
    --debug flag  >  MAPP_LOG_LEVEL env var  >  INFO (default)

The file sink never drops below INFO so the durable log always holds
the full story of a run.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

# ── Format strings ──────────────────────────────────────────────

_FMT_FILE = "[%(asctime)s] [%(level_tag)s] %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

_FMT_DEBUG = "%(asctime)s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_DEBUG = "%H:%M:%S"

_LEVEL_COLORS = {
    logging.DEBUG: ("DEBUG", "cyan"),
    logging.INFO: ("INFO", "green"),
    logging.WARNING: ("WARN", "yellow"),
    logging.ERROR: ("ERROR", "red"),
    logging.CRITICAL: ("ERROR", "red"),
}

# Third-party loggers that are noisy at INFO/DEBUG
_NOISY_LOGGERS = ("urllib3", "charset_normalizer")


class ConsoleFormatter(logging.Formatter):
    """Prefix each message with a colored ``[LEVEL]`` tag."""

    def __init__(self, fmt: str = "%(message)s", datefmt: str | None = None, color: bool = True):
        super().__init__(fmt, datefmt=datefmt)
        self._color = color

    def format(self, record: logging.LogRecord) -> str:
        label, color = _LEVEL_COLORS.get(record.levelno, (record.levelname, "white"))
        tag = f"[{label}]"
        if self._color:
            tag = click.style(tag, fg=color, bold=record.levelno >= logging.WARNING)
        return f"{tag} {super().format(record)}"


class FileFormatter(logging.Formatter):
    """Durable log format: ``[timestamp] [LEVEL] message``."""

    def format(self, record: logging.LogRecord) -> str:
        record.level_tag = _LEVEL_COLORS.get(record.levelno, (record.levelname, ""))[0]
        return super().format(record)


def setup_logging(
    level: str = "INFO",
    log_file: Path | str | None = None,
    color: bool | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Configure Python logging for the entire process.

    Args:
        level: Console log level name (DEBUG, INFO, WARNING, ERROR).
        log_file: Durable log path.  Created if absent, always appended.
        color: Force colored tags on/off.  Defaults to stdout being a TTY.
        quiet_third_party: Keep noisy third-party loggers at WARNING
            unless we're at DEBUG level.
    """
    numeric_level = _parse_level(level)
    if color is None:
        color = sys.stdout.isatty()

    # ── Console handler (stdout) ────────────────────────────────
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(numeric_level)
    if numeric_level <= logging.DEBUG:
        console.setFormatter(ConsoleFormatter(_FMT_DEBUG, _DATEFMT_DEBUG, color=color))
    else:
        console.setFormatter(ConsoleFormatter(color=color))

    # ── Root logger ─────────────────────────────────────────────
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)

    effective_level = numeric_level

    # ── File handler ────────────────────────────────────────────
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch(exist_ok=True)

        file_level = min(numeric_level, logging.INFO)
        effective_level = min(effective_level, file_level)

        fh = logging.FileHandler(path, mode="a", encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(FileFormatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    root.setLevel(effective_level)

    # ── Third-party noise control ───────────────────────────────
    if quiet_third_party and numeric_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def flush_logs() -> None:
    """Flush every root handler (before replaying the log file)."""
    for handler in logging.getLogger().handlers:
        handler.flush()


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.INFO
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.INFO
    return numeric

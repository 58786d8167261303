"""
Logging configuration — one setup call for the matchergen CLI.

Library users of the pipeline keep their own logging; only ``main.py``
calls ``setup_logging``. Every module logs through
``logging.getLogger(__name__)``, so the level chosen here governs the
whole ``matchergen`` namespace and the bean modules it imports.

Console level, highest precedence first:
    --debug / --verbose / --quiet  >  MATCHERGEN_LOG_LEVEL  >  WARNING

A second, independent sink can be added with MATCHERGEN_LOG_FILE
(level MATCHERGEN_LOG_FILE_LEVEL, defaulting to the console level).
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

ENV_LOG_LEVEL = "MATCHERGEN_LOG_LEVEL"
ENV_LOG_FILE = "MATCHERGEN_LOG_FILE"
ENV_LOG_FILE_LEVEL = "MATCHERGEN_LOG_FILE_LEVEL"

DEFAULT_LEVEL = "WARNING"

# ── Formats ─────────────────────────────────────────────────────

# (highest level the tier applies to, format, date format)
_CONSOLE_TIERS: tuple[tuple[int, str, str | None], ...] = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
)
_CONSOLE_DEFAULT = ("%(levelname)s: %(message)s", None)

_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Loggers that bean modules commonly trigger while being imported
_NOISY_LOGGERS = ("py.warnings", "asyncio")


def resolve_level(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the console level from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    env = os.environ if environ is None else environ
    return env.get(ENV_LOG_LEVEL, DEFAULT_LEVEL)


def setup_logging(
    level: str = DEFAULT_LEVEL,
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Replace the root handlers with a console sink and an optional file sink.

    Args:
        level: Console level name. Unknown names fall back to WARNING.
        log_file: Path of an additional log file.
        log_file_level: Level of the file sink (default: ``level``).
        quiet_third_party: Hold ``_NOISY_LOGGERS`` at WARNING unless the
            console runs at DEBUG.
    """
    console_level = _parse_level(level)
    handlers = [_console_handler(console_level)]

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        handlers.append(_file_handler(log_file, file_level))

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
    # The root must let through whatever the most verbose sink wants
    root.setLevel(min(handler.level for handler in handlers))

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def _console_handler(level: int) -> logging.Handler:
    fmt, datefmt = _CONSOLE_DEFAULT
    for ceiling, tier_fmt, tier_datefmt in _CONSOLE_TIERS:
        if level <= ceiling:
            fmt, datefmt = tier_fmt, tier_datefmt
            break
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
    return handler


def _parse_level(level: str | None) -> int:
    """Level name to its numeric value; WARNING when unknown."""
    numeric = getattr(logging, (level or DEFAULT_LEVEL).upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING

"""
Logging configuration — central setup for the CLI entrypoint.

Called once at startup by main.py. Every module that does
``logger = logging.getLogger(__name__)`` inherits this config.

Levels are resolved in precedence order:
    CLI flag  >  MCPB_LOG_LEVEL env var  >  WARNING (default)

Optional file output via MCPB_LOG_FILE / MCPB_LOG_FILE_LEVEL env vars.
User-facing progress never goes through logging; it is printed by the
console adapter. Logging carries diagnostics (argv, cwd, probe results).
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

ENV_LEVEL = "MCPB_LOG_LEVEL"
ENV_FILE = "MCPB_LOG_FILE"
ENV_FILE_LEVEL = "MCPB_LOG_FILE_LEVEL"

# (format, datefmt) per console threshold; the file always gets the detailed one
_CONSOLE_FORMATS = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d - %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s %(name)s: %(message)s", "%H:%M:%S"),
)
_MINIMAL_FORMAT = "%(levelname)s: %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d - %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Library loggers kept at WARNING unless we're debugging
_NOISY_LOGGERS = ("asyncio", "urllib3")


def resolve_level(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: dict[str, str] | None = None,
) -> str:
    """Pick the console level from CLI flags, falling back to the env var."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    env = os.environ if environ is None else environ
    return env.get(ENV_LEVEL, "WARNING")


def _console_handler(threshold: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(threshold)
    for ceiling, fmt, datefmt in _CONSOLE_FORMATS:
        if threshold <= ceiling:
            handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
            break
    else:
        handler.setFormatter(logging.Formatter(_MINIMAL_FORMAT))
    return handler


def _file_handler(path: str, threshold: int) -> logging.Handler:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(target, encoding="utf-8")
    handler.setLevel(threshold)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
    return handler


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Install the process-wide handlers. Replaces any existing root handlers.

    Args:
        level: Console level name. Unknown names mean WARNING.
        log_file: Also log to this file (parent directories are created).
        log_file_level: Level for the file. Defaults to ``level``.
        quiet_third_party: Hold library loggers at WARNING unless the
            console is at DEBUG.
    """
    console_level = _parse_level(level)
    handlers = [_console_handler(console_level)]
    lowest = console_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        handlers.append(_file_handler(log_file, file_level))
        lowest = min(lowest, file_level)

    root = logging.getLogger()
    root.handlers[:] = handlers
    root.setLevel(lowest)

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    # A closed stderr must never crash an install
    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    numeric = logging.getLevelName(level.upper()) if level else None
    return numeric if isinstance(numeric, int) else logging.WARNING

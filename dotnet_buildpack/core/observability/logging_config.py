"""
Logging configuration — set up once per staging run.

Staging output the developer sees (``-----> ...`` lines, restore output)
goes to the progress sink on stdout. Diagnostic logging goes to stderr
through this configuration, so the two never interleave in ``cf push``
output unless asked for.

Levels are resolved in precedence order:
    CLI flag  >  BP_LOG_LEVEL env var  >  WARNING (default)

Optional file output via BP_LOG_FILE / BP_LOG_FILE_LEVEL env vars.
"""

from __future__ import annotations

import logging
import sys

from dotnet_buildpack.core.config.settings import BuildpackSettings

# ── Format strings ──────────────────────────────────────────────

# WARNING and above: short, prefixed so it stands out in staging logs
_FMT_MINIMAL = "       %(levelname)s: %(message)s"

# INFO: timestamped with module context
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_DATEFMT_VERBOSE = "%H:%M:%S"

# DEBUG and file output: full diagnostic with file:line
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s"
_DATEFMT_DEBUG = "%Y-%m-%d %H:%M:%S"

# Libraries that log at INFO/DEBUG on import or validation
_NOISY_LOGGERS = ("yaml", "pydantic")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Configure Python logging for the staging process.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
        log_file_level: Optional separate level for the log file.
            Defaults to the same as ``level``.
        quiet_third_party: Keep library loggers at WARNING unless at DEBUG.
    """
    console_level = parse_level(level)

    if console_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT_DEBUG
    elif console_level <= logging.INFO:
        fmt, datefmt = _FMT_VERBOSE, _DATEFMT_VERBOSE
    else:
        fmt, datefmt = _FMT_MINIMAL, None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        file_level = parse_level(log_file_level) if log_file_level else console_level
        root_level = min(root_level, file_level)

        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(file_level)
        handler.setFormatter(logging.Formatter(_FMT_DEBUG, datefmt=_DATEFMT_DEBUG))
        root.addHandler(handler)

    # Root must pass records that either handler wants
    root.setLevel(root_level)

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def setup_logging_from_settings(
    settings: BuildpackSettings,
    level_override: str | None = None,
) -> None:
    """Configure logging from ``BuildpackSettings``; a CLI flag wins over env."""
    level = level_override or settings.log_level
    setup_logging(
        level=level,
        log_file=settings.log_file,
        log_file_level=settings.log_file_level,
        quiet_third_party=parse_level(level) > logging.DEBUG,
    )


def parse_level(level: str | None) -> int:
    """Convert a level name to its numeric constant; unknown names mean WARNING."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric

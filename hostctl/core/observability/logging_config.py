"""
Logging configuration — set up once by the CLI entrypoint.

Modules log through ``logging.getLogger(__name__)``. The console handler
writes to stderr so log lines never end up in text a recipe prints on
stdout, nor in the stream of a wrapped command.

Console level, highest precedence first:
    --debug, --verbose, --quiet, $HOSTCTL_LOG_LEVEL, WARNING

$HOSTCTL_LOG_FILE adds a file handler at $HOSTCTL_LOG_FILE_LEVEL
(default: the console level).
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LEVEL = "HOSTCTL_LOG_LEVEL"
ENV_FILE = "HOSTCTL_LOG_FILE"
ENV_FILE_LEVEL = "HOSTCTL_LOG_FILE_LEVEL"

# (upper bound, format, datefmt); the first row whose bound admits the level wins
_CONSOLE_FORMATS: list[tuple[int, str, str | None]] = [
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
    (logging.CRITICAL, "%(message)s", None),
]

_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def level_from_flags(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Console level name for the given CLI flags."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LEVEL, "WARNING")


def _console_handler(level: int) -> logging.Handler:
    fmt, datefmt = next(
        (f, d) for bound, f, d in _CONSOLE_FORMATS if level <= bound
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
    return handler


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root logger's handlers.

    Args:
        level: Console level name; unknown names mean WARNING.
        log_file: Also log to this file.
        log_file_level: Level for ``log_file`` (defaults to ``level``).
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
    root.setLevel(min(h.level for h in handlers))

    # a closed stderr (pager quit, broken pipe) must not print tracebacks
    logging.raiseExceptions = False


def setup_from_environment(level: str) -> None:
    """``setup_logging`` with the log file taken from the environment."""
    setup_logging(
        level=level,
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
    )


def _parse_level(name: str | None) -> int:
    value = logging.getLevelName(name.upper()) if name else logging.WARNING
    return value if isinstance(value, int) else logging.WARNING

"""Logging setup for the Google Cloud MCP server.

stdout carries the MCP stdio protocol, so records only ever go to stderr and,
optionally, a log file.
"""

from __future__ import annotations

import logging
import sys
import threading
from pathlib import Path

from gcp_mcp.config import LoggingSettings, load_settings

_logging_configured = False
_logging_lock = threading.Lock()

_logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Client libraries that log every request (httpx logs full URLs at INFO).
# They stay at WARNING unless the server itself runs at DEBUG.
THIRD_PARTY_LOGGERS: tuple[str, ...] = (
    "httpx",
    "httpcore",
    "urllib3",
    "google.auth",
    "google.api_core",
)


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _build_handlers(settings: LoggingSettings) -> list[logging.Handler]:
    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT)
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    handlers: list[logging.Handler] = [stream_handler]

    if not settings.file:
        return handlers
    log_path = Path(settings.file).expanduser()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError as exc:
        _logger.warning("Failed to open log file %s: %s", log_path, exc)
        return handlers
    file_handler.setFormatter(formatter)
    handlers.append(file_handler)
    return handlers


def configure_logging(settings: LoggingSettings | None = None) -> None:
    """Install the server's handlers on the root logger.

    Passing ``settings`` skips the environment lookup.
    """
    global _logging_configured

    settings = settings or load_settings().logging
    level = _resolve_level(settings.level)

    logging.basicConfig(level=level, handlers=_build_handlers(settings), force=True)

    third_party_level = logging.DEBUG if level <= logging.DEBUG else max(level, logging.WARNING)
    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    if not _logging_configured:
        with _logging_lock:
            if not _logging_configured:
                configure_logging()
    return logging.getLogger(name)

"""
Logging Setup.

structlog on top of stdlib logging. Every module gets its logger from
get_logger(__name__); front ends call setup_logging() once at start-up.
Settings come from config/settings/logging.yaml, validated by LoggingSchema.

Handlers:
    console   stderr, coloured key=value lines (or JSON); the TUI turns it off
    file      logs/system.jsonl, one JSON object per record, rotated by size

A file record looks like:
    {"event": "Entry created", "level": "info", "logger": "sleeplog.repositories.entry",
     "timestamp": "...", "func_name": "upsert", "lineno": 97, "entry_id": "...", "count": 3}

Front ends tag their records with log_with_source(); filter the file on the
'source' field (cli, tui, internal) to follow one of them.

Usage:
    setup_logging()                                   # logging.yaml as is
    setup_logging(level="DEBUG", enable_console=False)

    logger = get_logger(__name__)
    logger.info("Entry saved", entry_id=entry.id)
    log_with_source(logger, "cli", "info", "Entry added", entry_id=entry.id)
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor

from sleeplog.core.config import find_project_root, get_settings, load_yaml_config
from sleeplog.core.config_schema import FileHandlerSchema, LoggingSchema

VALID_SOURCES = frozenset({"cli", "tui", "internal"})
"""Values accepted for the 'source' field. Callers set it explicitly."""

# Loggers that flood DEBUG output without saying anything about entries.
_NOISY_LOGGERS = ("asyncio", "textual")

_logging_config: dict[str, Any] | None = None


def _load_logging_config() -> dict[str, Any]:
    """
    Read logging.yaml once per process.

    Raises:
        FileNotFoundError: If logging.yaml does not exist
    """
    global _logging_config
    if _logging_config is None:
        _logging_config = load_yaml_config("logging.yaml")
    return _logging_config


def _resolve_log_path(configured_path: str) -> Path:
    """Absolute paths are kept; relative ones hang off the project root."""
    path = Path(configured_path)
    return path if path.is_absolute() else find_project_root() / path


def _shared_processors() -> list[Processor]:
    """Enrichment applied to structlog and foreign stdlib records alike."""
    callsite = structlog.processors.CallsiteParameterAdder(
        parameters=[
            structlog.processors.CallsiteParameter.FUNC_NAME,
            structlog.processors.CallsiteParameter.LINENO,
        ],
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        callsite,
    ]


def _formatter(renderer: Processor, pre_chain: list[Processor]) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)


def _file_handler(settings: FileHandlerSchema, formatter: logging.Formatter) -> logging.Handler:
    log_path = _resolve_log_path(settings.path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(log_path),
        maxBytes=settings.max_bytes,
        backupCount=settings.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structlog and the root logger's handlers.

    Precedence for the level: `level`, then SLEEPLOG_LOG_LEVEL, then
    logging.yaml. The other arguments override their logging.yaml
    counterparts when given. Calling again replaces the previous handlers.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        format_type: Console format, 'json' or 'console'
        enable_console: Write records to stderr
        enable_file_logging: Write records to the JSONL file
    """
    config = LoggingSchema.model_validate(_load_logging_config())
    handlers = config.handlers

    level_name = (level or get_settings().log_level or config.level).upper()
    console_format = format_type or config.format
    console_on = handlers.console.enabled if enable_console is None else enable_console
    file_on = handlers.file.enabled if enable_file_logging is None else enable_file_logging

    pre_chain = _shared_processors()
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_formatter = _formatter(structlog.processors.JSONRenderer(), pre_chain)

    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name))
    for handler in list(root.handlers):
        root.removeHandler(handler)

    if console_on:
        console = logging.StreamHandler(sys.stderr)
        if console_format == "console":
            console.setFormatter(_formatter(structlog.dev.ConsoleRenderer(colors=True), pre_chain))
        else:
            console.setFormatter(json_formatter)
        root.addHandler(console)

    if file_on:
        root.addHandler(_file_handler(handlers.file, json_formatter))

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """structlog logger for a module; pass __name__."""
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log `message` at `level` with the 'source' field set.

    Raises:
        AttributeError: If level is not a logger method name

    Example:
        log_with_source(logger, "tui", "error", "Save failed", error=e.message)
    """
    getattr(logger, level.lower())(message, source=source, **kwargs)

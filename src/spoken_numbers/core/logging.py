#!/usr/bin/env python3
"""
Structured logging for spoken_numbers with context management.

Features:
- Environment-driven configuration (LOG_LEVEL, LOG_OUTPUT, LOG_FORMAT)
- JSON lines or human readable output
- Context propagation through contextvars (e.g. the utterance being parsed)
- Console by default, optional rotating file output
"""
from __future__ import annotations

import json
import logging
import logging.handlers
import os
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Dict, Optional

# Context variables for automatic context propagation
_log_context: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})

_RESERVED_RECORD_KEYS = frozenset(
    (
        "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
        "module", "lineno", "funcName", "created", "msecs", "relativeCreated",
        "thread", "threadName", "processName", "process", "message", "exc_info",
        "exc_text", "stack_info", "context", "taskName",
    )
)

OUTPUT_MODES = ("console", "file", "both", "none")


class StructuredFormatter(logging.Formatter):
    """
    Formatter that outputs JSON lines or a readable single line.
    """

    def __init__(self, use_json: bool = False):
        self.use_json = use_json
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        context = _log_context.get({})

        # Merge context from record if available
        if getattr(record, "context", None):
            context = {**context, **record.context}

        if self.use_json:
            return self._format_json(record, context)
        return self._format_readable(record, context)

    def _format_json(self, record: logging.LogRecord, context: Dict[str, Any]) -> str:
        """Format log record as JSON."""
        log_entry = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "module": record.name,
            "message": record.getMessage(),
        }

        if context:
            log_entry["context"] = context

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Anything passed through ``extra=`` ends up on the record
        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)

    def _format_readable(self, record: logging.LogRecord, context: Dict[str, Any]) -> str:
        """Format log record in human-readable format."""
        timestamp = self.formatTime(record, datefmt="%Y-%m-%d %H:%M:%S")

        context_str = ""
        if context:
            context_parts = [f"{k}={v}" for k, v in context.items()]
            context_str = f" | {' '.join(context_parts)}"

        base_msg = f"{timestamp} | {record.levelname:5} | {record.name} | {record.getMessage()}{context_str}"

        if record.exc_info:
            base_msg += f"\n{self.formatException(record.exc_info)}"

        return base_msg


class ContextLogger(logging.LoggerAdapter):
    """
    Logger adapter that automatically includes context in log messages.
    """

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, extra or {})

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple[str, Dict[str, Any]]:
        context = _log_context.get({})

        if self.extra:
            context = {**context, **self.extra}

        # Call-specific context: logger.info("...", extra={"context": {...}})
        if kwargs.get("extra"):
            call_context = kwargs["extra"].pop("context", {})
            context = {**context, **call_context}

        kwargs.setdefault("extra", {})
        kwargs["extra"]["context"] = context

        return msg, kwargs


def get_log_level() -> str:
    """Get log level from environment or default to INFO."""
    return os.environ.get("LOG_LEVEL", "INFO").upper()


def get_log_output() -> str:
    """Get log output mode from environment or default to console."""
    return os.environ.get("LOG_OUTPUT", "console").lower()


def use_json_format() -> bool:
    """JSON lines are used when LOG_FORMAT=json."""
    return os.environ.get("LOG_FORMAT", "").lower() == "json"


def setup_structured_logging(
    name: str,
    log_level: Optional[str] = None,
    log_output: Optional[str] = None,
    force_json: Optional[bool] = None,
    context: Optional[Dict[str, Any]] = None,
    logs_dir: Optional[Path] = None,
) -> ContextLogger:
    """
    Setup standardized structured logging.

    Args:
        name: Logger name (typically __name__)
        log_level: Log level override (DEBUG, INFO, WARNING, ERROR)
        log_output: Output mode override (console, file, both, none)
        force_json: Force JSON output regardless of LOG_FORMAT
        context: Default context to include in all log messages
        logs_dir: Directory for the file handler (defaults to ./logs)

    Returns:
        ContextLogger instance with structured logging configured

    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers
    if logger.handlers:
        return ContextLogger(logger, context)

    level = (log_level or get_log_level()).upper()
    output = (log_output or get_log_output()).lower()
    if output not in OUTPUT_MODES:
        output = "console"
    use_json = force_json if force_json is not None else use_json_format()

    logger.setLevel(getattr(logging, level, logging.INFO))

    formatter = StructuredFormatter(use_json=use_json)

    if output in ("console", "both"):
        _setup_console_handlers(logger, formatter)

    if output in ("file", "both"):
        _setup_file_handler(logger, formatter, name, logs_dir)

    if output == "none":
        logger.addHandler(logging.NullHandler())

    # Prevent propagation to avoid duplicate messages
    logger.propagate = False

    return ContextLogger(logger, context)


def _setup_console_handlers(logger: logging.Logger, formatter: StructuredFormatter) -> None:
    """INFO and DEBUG go to stdout, WARNING and above to stderr."""
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    stdout_handler.setLevel(logging.DEBUG)
    stdout_handler.addFilter(lambda record: record.levelno < logging.WARNING)
    logger.addHandler(stdout_handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    stderr_handler.setLevel(logging.WARNING)
    logger.addHandler(stderr_handler)


def _setup_file_handler(
    logger: logging.Logger, formatter: StructuredFormatter, name: str, logs_dir: Optional[Path]
) -> None:
    """Setup rotating file handler."""
    if logs_dir is None:
        logs_dir = Path.cwd() / "logs"
    logs_dir = Path(logs_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)

    module_basename = name.split(".")[-1] if "." in name else name
    log_file = logs_dir / f"{module_basename}.log"

    # 5MB max, 3 backups
    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)


def set_context(**kwargs: Any) -> None:
    """
    Set logging context for the current execution context.

    Args:
        **kwargs: Context key-value pairs (e.g., language="en", utterance="...")
    """
    current_context = _log_context.get({})
    _log_context.set({**current_context, **kwargs})


def clear_context() -> None:
    """Clear all logging context for the current execution context."""
    _log_context.set({})


def get_context() -> Dict[str, Any]:
    """Get current logging context."""
    return _log_context.get({}).copy()


class LogContext:
    """
    Context manager for temporary logging context.

    Usage:
        with LogContext(operation="extract_duration", language="en"):
            logger.debug("Scanning tokens")  # Will include context
    """

    def __init__(self, **kwargs: Any):
        self.new_context = kwargs
        self.old_context: Dict[str, Any] = {}

    def __enter__(self):
        self.old_context = get_context()
        set_context(**{**self.old_context, **self.new_context})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _log_context.set(self.old_context)


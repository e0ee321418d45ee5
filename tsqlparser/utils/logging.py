"""
Structured logging utilities with JSON formatting and context injection.

This module provides:
- JSON formatted log output for machine-readable logs
- Context injection (script_id, batch_index, phase) via LoggerAdapter
- Helpers for the parse phases and diagnostics the parser reports

``setup_logging`` and ``LogContext`` are for applications embedding the
parser: the library itself only logs through ``get_logger`` and never
configures handlers.
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from logging import LogRecord
from typing import Any, Dict, MutableMapping, Optional

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset([
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info",
    "taskName",
])

# Promoted to top-level keys of the JSON document.
_CONTEXT_FIELDS = ("script_id", "batch_index", "phase")


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs log records as JSON with the fields timestamp, level, logger,
    message, the promoted context fields (script_id, batch_index, phase),
    any other ``extra`` values under ``context`` and exception details.
    """

    def format(self, record: LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in _CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and key not in _CONTEXT_FIELDS
        }
        if extra_fields:
            log_data["context"] = extra_fields

        if record.exc_info:
            log_data["error"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "stack_trace": "".join(traceback.format_exception(*record.exc_info)),
            }

        log_data["source"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
        }

        return json.dumps(log_data, default=str)


class LogContext:
    """
    Context manager for adding temporary context to logs.

    Usage:
        with LogContext(logger, batch_index=2):
            logger.debug("Parsing batch")  # Will include batch_index
    """

    def __init__(self, logger: logging.LoggerAdapter, **context: Any):
        self.logger = logger
        self.context = context
        self.old_extra: Optional[Dict[str, Any]] = None

    def __enter__(self) -> logging.LoggerAdapter:
        self.old_extra = dict(self.logger.extra) if self.logger.extra else {}
        self.logger.extra = {**self.old_extra, **self.context}
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.old_extra is not None:
            self.logger.extra = self.old_extra


class ContextLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that injects its context fields into every record."""

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, extra or {})

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> tuple[str, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra.update(self.extra)
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **context: Any) -> "ContextLoggerAdapter":
        """Create a new adapter with additional context."""
        new_extra = dict(self.extra)
        new_extra.update(context)
        return ContextLoggerAdapter(self.logger, new_extra)


def setup_logging(log_level: Optional[str] = None) -> None:
    """
    Configure structured JSON logging on the root logger.

    Args:
        log_level: Log level name; defaults to ``settings.log_level``
    """
    if log_level is None:
        from tsqlparser.config import settings
        log_level = settings.log_level

    formatter = JSONFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)


def get_logger(name: str, **context: Any) -> ContextLoggerAdapter:
    """
    Get a context-aware logger for a module.

    Example:
        logger = get_logger(__name__, script_id="deploy.sql")
        logger.info("Parsing script")  # Will include script_id
    """
    return ContextLoggerAdapter(logging.getLogger(name), context)


def log_parse_phase(
    logger: logging.LoggerAdapter,
    phase: str,
    status: str,
    **context: Any,
) -> None:
    """
    Log a parse phase transition.

    Args:
        logger: Logger to use
        phase: Phase name ('tokenize', 'split_batches', 'parse_batch')
        status: 'started' or 'completed'
        **context: Extra fields such as batch_index or token_count
    """
    logger.debug(
        f"Parse phase {status}: {phase}",
        extra={"phase": phase, "status": status, **context},
    )


def log_diagnostic(logger: logging.LoggerAdapter, diagnostic) -> None:
    """Log a diagnostic at the level matching its severity."""
    extra = {
        "code": diagnostic.code.value,
        "severity": diagnostic.severity.value,
        "line": diagnostic.span.start_line,
        "column": diagnostic.span.start_column,
    }
    if diagnostic.batch_index is not None:
        extra["batch_index"] = diagnostic.batch_index

    if diagnostic.severity.value == "error":
        logger.warning(f"Parse error: {diagnostic.message}", extra=extra)
    else:
        logger.debug(f"Parse {diagnostic.severity.value}: {diagnostic.message}", extra=extra)


def log_error_with_context(
    logger: logging.LoggerAdapter,
    message: str,
    error: Exception,
    **context: Any,
) -> None:
    """Log an unexpected error with full stack trace and context."""
    logger.error(message, extra=context, exc_info=error)

"""
Logging setup for the blog service.

Read-pipeline failures, the post creation audit trail and timing samples all
go through ``StructuredLogger``: keyword arguments become structured context
rendered as ``key=value`` on the console and as top-level keys in the JSON
log file.
"""
import json
import logging
import logging.config
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

# Third-party loggers routed through the same handlers, with their own floor.
_LIBRARY_LEVELS = {
    "uvicorn": "INFO",
    "aiohttp.client": "WARNING",
}

class JSONFormatter(logging.Formatter):
    """One JSON object per record; context keys are merged in at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "where": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        context = getattr(record, "context", None)
        if context:
            entry.update(context)
        if record.exc_info:
            entry["traceback"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)

class ContextFormatter(logging.Formatter):
    """Console formatter: ``<standard line> | key=value key=value``."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = getattr(record, "context", None)
        if context:
            line += " | " + " ".join(f"{key}={value}" for key, value in context.items())
        return line

class StructuredLogger:
    """Thin wrapper over ``logging.Logger`` taking context as keyword arguments.

    ``None`` values are dropped from the context; ``exc_info=True`` attaches
    the active traceback.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _emit(self, level: int, message: str, exc_info: bool = False, **context: Any) -> None:
        cleaned = {key: value for key, value in context.items() if value is not None}
        self.logger.log(level, message, exc_info=exc_info, extra={"context": cleaned})

    def debug(self, message: str, **context: Any) -> None:
        self._emit(logging.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> None:
        self._emit(logging.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self._emit(logging.WARNING, message, **context)

    def error(self, message: str, **context: Any) -> None:
        self._emit(logging.ERROR, message, **context)

def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    enable_console: bool = True,
) -> None:
    """
    Configure the ``app`` logger tree plus uvicorn and aiohttp.

    Args:
        log_level: Level name applied to the application loggers and handlers
        log_file: Optional path; when set, a rotating JSON log is written there
        enable_console: Emit human-readable lines on stdout
    """
    handlers: Dict[str, Dict[str, Any]] = {}
    if enable_console:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "stream": sys.stdout,
            "formatter": "context",
            "level": log_level,
        }
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["json_file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": log_file,
            "maxBytes": 10 * 1024 * 1024,
            "backupCount": 5,
            "formatter": "json",
            "level": log_level,
        }
    names: List[str] = list(handlers)

    loggers: Dict[str, Dict[str, Any]] = {"app": {"level": log_level, "handlers": names, "propagate": False}}
    for library, level in _LIBRARY_LEVELS.items():
        loggers[library] = {"level": level, "handlers": names, "propagate": False}

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": JSONFormatter},
            "context": {
                "()": ContextFormatter,
                "format": "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": handlers,
        "loggers": loggers,
        "root": {"level": log_level, "handlers": names},
    })

def get_logger(name: str) -> StructuredLogger:
    """Return a StructuredLogger under the ``app.`` namespace."""
    if name == "app" or name.startswith("app."):
        return StructuredLogger(name)
    return StructuredLogger(f"app.{name}")

def log_business_event(
    event_type: str,
    details: Dict[str, Any],
    user_id: Optional[str] = None,
    request_id: Optional[str] = None,
) -> None:
    """
    Record an audit event such as ``blog_post_created``.

    Args:
        event_type: Event name
        details: Event payload merged into the log context
        user_id: Acting user, when known
        request_id: Correlation id, when known
    """
    get_logger("audit").info(
        f"Business event: {event_type}",
        event_type=event_type,
        user_id=user_id,
        request_id=request_id,
        **details,
    )

def log_performance(
    operation: str,
    duration_ms: float,
    additional_data: Optional[Dict[str, Any]] = None,
) -> None:
    """Log how long an operation took."""
    context: Dict[str, Any] = dict(additional_data or {})
    context["duration_ms"] = round(duration_ms, 2)
    get_logger("performance").info(f"Performance: {operation}", operation=operation, **context)

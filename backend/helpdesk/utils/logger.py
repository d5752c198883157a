"""Structured JSON Logging with Correlation ID Support"""
import json
import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

from ..config.settings import settings


correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

# Record attributes copied into the JSON line when passed via `extra=`
CONTEXT_FIELDS = (
    "ticket_id",
    "template_id",
    "field_name",
    "action",
    "status",
    "error_code",
)


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        correlation_id = correlation_id_var.get()
        if correlation_id:
            log_obj["correlation_id"] = correlation_id

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_obj[field] = getattr(record, field)

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, default=str)


def _rotating_handler(path: str, level: int = logging.NOTSET) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding="utf-8"
    )
    handler.setLevel(level)
    return handler


def setup_logging(log_to_files: bool = True) -> None:
    """
    Configure the root logger.

    Console output always goes to stdout as JSON. When `log_to_files` is set,
    app.log and error.log are written under `settings.logs_path`.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    root_logger.handlers.clear()

    json_formatter = JsonFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(json_formatter)
    root_logger.addHandler(console_handler)

    if log_to_files:
        os.makedirs(settings.logs_path, exist_ok=True)
        for handler in (
            _rotating_handler(os.path.join(settings.logs_path, "app.log")),
            _rotating_handler(os.path.join(settings.logs_path, "error.log"), logging.ERROR),
        ):
            handler.setFormatter(json_formatter)
            root_logger.addHandler(handler)

    # Reduce verbosity of third-party loggers
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name"""
    return logging.getLogger(name)


def set_correlation_id(correlation_id: str) -> None:
    """Set correlation ID in context"""
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    """Get correlation ID from context"""
    return correlation_id_var.get()

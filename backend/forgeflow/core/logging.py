# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Structured logging for the ForgeFlow backend.

Engine components emit named events (workflow_started, node_failed, ...) through
log_event; with the JSON format every keyword becomes a top-level field.
"""

import logging
import json
import sys
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries; anything else came in through `extra`
_RESERVED_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName",
    "relativeCreated", "thread", "threadName", "exc_info",
    "exc_text", "stack_info", "taskName",
}


class JSONFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message plus extras"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        log_data.update(
            (key, value) for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS
        )

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable format for local development."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )


def get_logger(name: str, log_level: str = "INFO", log_format: str = "json") -> logging.Logger:
    """
    Get a logger writing to stdout.

    Args:
        name: Logger name
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_format: "json" or "text"

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, log_level.upper()))

    # Reconfiguring replaces the previous handler
    logger.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if log_format == "json" else TextFormatter())
    logger.addHandler(handler)

    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    level: str = "INFO",
    **kwargs: Any
) -> None:
    """
    Log a named event with structured fields.

    Args:
        logger: Logger instance
        event: Event name, used as the message
        level: Log level
        **kwargs: Fields attached to the record (execution_id, node_id, ...)
    """
    getattr(logger, level.lower())(event, extra=kwargs)


def _configured_logger(name: str) -> logging.Logger:
    from forgeflow.core.config import get_config
    config = get_config()
    return get_logger(name, log_level=config.log_level, log_format=config.log_format)


def get_api_logger() -> logging.Logger:
    """Get logger for API routes."""
    return _configured_logger("forgeflow.api")


def get_service_logger(service_name: str) -> logging.Logger:
    """Get logger for service layer."""
    return _configured_logger(f"forgeflow.service.{service_name}")


def get_engine_logger(component: str) -> logging.Logger:
    return _configured_logger(f"forgeflow.engine.{component}")

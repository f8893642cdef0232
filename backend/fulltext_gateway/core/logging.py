"""Structured JSON logging for the gateway.

Every record carries the request id of the call that produced it, so engine
errors logged deep in the search path can be matched to the HTTP request
(and to the ``request_id`` in the error envelope the client received).
"""

import contextvars
import logging
import sys
from typing import Any

from pythonjsonlogger import jsonlogger

from fulltext_gateway.core.config import settings

# Set by RequestIDMiddleware for the lifetime of one request
request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("request_id", default=None)


def get_current_request_id() -> str | None:
    """Request id of the call being served, if any."""
    return request_id_var.get()


class GatewayJsonFormatter(jsonlogger.JsonFormatter):
    """One JSON object per record with stable top-level keys."""

    def add_fields(self, log_record: dict[str, Any], record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["service"] = settings.PROJECT_NAME
        if not log_record.get("request_id"):
            request_id = get_current_request_id()
            if request_id:
                log_record["request_id"] = request_id

        log_record.pop("asctime", None)


def setup_logging() -> None:
    """Route all loggers to stdout as JSON at ``LOG_LEVEL``."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        GatewayJsonFormatter(
            "%(timestamp)s %(level)s %(logger)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    root_logger.addHandler(handler)

    # Transport logs every request at INFO; keep only its warnings
    logging.getLogger("elastic_transport").setLevel(logging.WARNING)
    logging.getLogger("elasticsearch").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)

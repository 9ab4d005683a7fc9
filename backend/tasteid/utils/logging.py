"""Structured logging configuration

Application code logs through structlog with keyword context
(``logger.info("Item added", collection_id=..., position=...)``). Uvicorn's
stdlib loggers are routed through a JSON formatter so both streams carry the
same service fields.
"""

import logging
import sys
import uuid
from typing import Optional

import structlog
from pythonjsonlogger import jsonlogger

from ..config import settings

SERVICE_NAME = "tasteid-backend"


def add_service_context(logger, method_name, event_dict):
    """Stamp every event with service and environment"""
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("environment", settings.ENVIRONMENT)
    return event_dict


def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structlog for JSON output on stdout

    Args:
        log_level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    level = getattr(logging, log_level.upper())

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            add_service_context,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        # Tests swap processors with structlog.testing.capture_logs
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(request_id: Optional[str] = None, **context) -> str:
    """
    Bind a request id (and any extra fields) to every log line of this request

    Returns:
        The request id, generated when the caller did not send one
    """
    request_id = request_id or uuid.uuid4().hex
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, **context)
    return request_id


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter for stdlib records, matching the structlog fields"""

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['service'] = SERVICE_NAME
        log_record['environment'] = settings.ENVIRONMENT
        log_record['logger_name'] = record.name

        if record.exc_info:
            log_record['exception'] = self.formatException(record.exc_info)


def configure_uvicorn_logging() -> None:
    """Send uvicorn access and error logs through ``CustomJsonFormatter``"""
    formatter = CustomJsonFormatter('%(timestamp)s %(levelname)s %(name)s %(message)s', timestamp=True)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    for name in ("uvicorn.access", "uvicorn.error"):
        logging.getLogger(name).handlers = [handler]

"""
Structured Logging Configuration

Configures JSON-formatted logging with request context for tracing:
a correlation ID for every request, plus the Razorpay event ID while a
webhook delivery is being processed.
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

ROOT_LOGGER_NAME = "relay"

# Context variable for correlation ID
correlation_id_var: ContextVar[Optional[str]] = ContextVar(
    "correlation_id", default=None
)

# Context variable for the x-razorpay-event-id of the delivery being handled
razorpay_event_id_var: ContextVar[Optional[str]] = ContextVar(
    "razorpay_event_id", default=None
)


class RequestContextFilter(logging.Filter):
    """Add correlation ID and Razorpay event ID to log records"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get() or "N/A"

        # Only webhook deliveries carry an event ID
        event_id = razorpay_event_id_var.get()
        if event_id:
            record.razorpay_event_id = event_id
        return True


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    Custom JSON formatter for structured logging.
    Includes request context, timestamp, and source location.
    """

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        """Add custom fields to log record"""
        super().add_fields(log_record, record, message_dict)

        # Add standard fields
        log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName
        log_record["line"] = record.lineno

        # Add request context
        if hasattr(record, "correlation_id"):
            log_record["correlation_id"] = record.correlation_id
        if hasattr(record, "razorpay_event_id"):
            log_record["razorpay_event_id"] = record.razorpay_event_id

        # Add exception info if present
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """
    Configure application logging with JSON formatting.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured root application logger
    """
    # Create the "relay" logger; module loggers are its children
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(log_level)
    logger.propagate = False

    # Remove existing handlers so repeated setup does not duplicate output
    logger.handlers.clear()

    # Lambda and uvicorn both collect stdout
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )
    console_handler.setFormatter(formatter)

    # Attach request context to every record
    console_handler.addFilter(RequestContextFilter())

    logger.addHandler(console_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Logger name (typically module name)

    Returns:
        Child of the application logger
    """
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """
    Set correlation ID for the current context.
    Generates a new UUID if not provided.

    Args:
        correlation_id: Optional correlation ID

    Returns:
        The correlation ID that was set
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    correlation_id_var.set(correlation_id)
    return correlation_id


def set_razorpay_event_id(event_id: Optional[str]) -> None:
    """Tag log records in the current context with a Razorpay event ID"""
    razorpay_event_id_var.set(event_id or None)


# Initialize default logger
default_logger = setup_logging()

"""
logging_config.py - Centralized JSON Logging Configuration

PURPOSE:
    Provides structured JSON logging for the store service with timezone-aware
    timestamps, correlation tracking, and service-specific context injection.

JSON LOG FIELDS:
    - timestamp: ISO 8601 format in the configured timezone (LOG_TIMEZONE, default UTC)
    - level: Log level (INFO, ERROR, WARNING, DEBUG, CRITICAL)
    - logger: Module name where the log originated (e.g., "services.store_service.cart_service")
    - message: The actual log message
    - service_name: Name of the service (injected automatically)
    - correlation_id: Optional tracing ID
    - event_type: Optional catalog event type being published
    - exception: Full stack trace (only when exc_info is attached)

USAGE:
    from shared.logging_config import setup_logging
    setup_logging("store-service", level="INFO")

    logger = logging.getLogger(__name__)
    logger.info("Product added", extra={"event_type": "product.added"})

EXAMPLE JSON OUTPUT:
    {
        "timestamp": "2026-10-17T22:48:51.001014+00:00",
        "level": "INFO",
        "logger": "services.store_service.cart_service",
        "message": "Added product 3 to cart 9f0c...",
        "service_name": "store-service"
    }
"""

import json
import logging
import os
import sys
from datetime import datetime
from typing import Any, Dict
from zoneinfo import ZoneInfo

LOG_TIMEZONE = ZoneInfo(os.getenv("LOG_TIMEZONE", "UTC"))


class JsonFormatter(logging.Formatter):
    """Custom formatter that outputs JSON logs with correlation context."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(LOG_TIMEZONE).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "correlation_id"):
            log_data["correlation_id"] = record.correlation_id
        if hasattr(record, "service_name"):
            log_data["service_name"] = record.service_name
        if hasattr(record, "event_type"):
            log_data["event_type"] = record.event_type

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ServiceFilter(logging.Filter):
    """Add the service name to every record passing through the handler."""

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service_name = self.service_name
        return True


def setup_logging(service_name: str, level: str = "INFO") -> None:
    """Setup JSON logging for a service. Calling it again only updates the level."""
    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers:
        if isinstance(handler.formatter, JsonFormatter):
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    # Filters on the handler also see records propagated from child loggers
    handler.addFilter(ServiceFilter(service_name))
    root.addHandler(handler)

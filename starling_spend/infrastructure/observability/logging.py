"""Structured JSON logging"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args: Any, service: str = "starling-spend", **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.service = service

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service


def setup_logging(level: str = "INFO", service: str = "starling-spend") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service=service,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_fetch(entity: str, path: str, status_code: int | None, duration_ms: float) -> None:
    """Log one bank API round trip; never includes credentials"""
    logging.getLogger("starling_spend.client").debug(
        "Bank API request completed",
        extra={
            "step": "bank_fetch",
            "entity": entity,
            "path": path,
            "status_code": status_code,
            "duration_ms": duration_ms,
        },
    )

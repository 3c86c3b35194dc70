"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger
from circle_ledger.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_ledger_event(
    message: str,
    request_id: str,
    step: str,
    member_id: str,
    loan_id: Optional[str] = None,
    amount: Optional[Decimal] = None,
    **fields: Any,
) -> None:
    """Log a structured ledger mutation for audit and analysis"""
    extra: Dict[str, Any] = {
        "request_id": request_id,
        "member_id": member_id,
        "step": step,
    }
    if loan_id is not None:
        extra["loan_id"] = loan_id
    if amount is not None:
        extra["amount"] = str(amount)
    extra.update(fields)

    logging.info(message, extra=extra)

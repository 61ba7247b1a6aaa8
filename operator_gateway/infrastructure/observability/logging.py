"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from operator_gateway.config import settings

audit_logger = logging.getLogger("operator_gateway.audit")


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


def log_transaction(
    reference: str,
    operator: str,
    transaction_type: str,
    success: bool,
    total_commission: str,
    duration_ms: float,
) -> None:
    """Log structured transaction outcome for analysis"""
    logging.info(
        "Transaction executed",
        extra={
            "reference": reference,
            "operator": operator,
            "transaction_type": transaction_type,
            "step": "transaction_complete",
            "outcome": "success" if success else "failed",
            "total_commission": total_commission,
            "duration_ms": duration_ms,
        },
    )


def log_audit_record(record: Dict[str, Any]) -> None:
    """Default sink for the Logging execution step"""
    audit_logger.info("Transaction audit record", extra={"audit": record})

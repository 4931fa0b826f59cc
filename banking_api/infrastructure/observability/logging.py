"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "banking-api"


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


def log_transaction_outcome(
    account_number: str,
    transaction_type: str,
    amount: int,
    outcome: str,
    duration_ms: float,
    reason: str | None = None,
) -> None:
    """Log structured transaction outcome for analysis"""
    extra = {
        "account_number": account_number,
        "step": "transaction_complete",
        "transaction_type": transaction_type,
        "amount": amount,
        "outcome": outcome,
        "duration_ms": duration_ms,
    }
    if reason is not None:
        extra["reason"] = reason

    if outcome == "committed":
        logging.info("Transaction committed", extra=extra)
    else:
        logging.warning("Transaction rejected", extra=extra)


def log_account_created(account_number: str, created: bool) -> None:
    """Log account creation attempt"""
    logging.info(
        "Account created" if created else "Account creation conflict",
        extra={
            "account_number": account_number,
            "step": "account_create",
            "outcome": "created" if created else "conflict",
        },
    )

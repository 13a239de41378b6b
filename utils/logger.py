"""Logging configuration using Loguru."""

import os
import sys
from datetime import datetime


from loguru import logger

logger.remove()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "false").lower() == "true"
LOG_SCORING_TRACE = os.getenv("LOG_SCORING_TRACE", "false").lower() == "true"

LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level} | {extra[name]}:{function}:{line} | {message}"
)

logger.configure(extra={"name": "dedup"})

logger.add(
    sys.stderr,
    format=LOG_FORMAT,
    level=LOG_LEVEL,
)

SESSION_ID = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

if LOG_TO_FILE:
    logger.add(
        f"logs/dedup_{SESSION_ID}.log",
        format=LOG_FORMAT,
        level="DEBUG",
        rotation="10 MB",
        retention="7 days",
        compression="zip",
    )


def is_scoring_trace(record) -> bool:
    """Sink filter for per-record scoring lines (bound with ``record_id``)."""
    return "record_id" in record["extra"]


# One JSON line per scored record, for tuning thresholds offline
if LOG_SCORING_TRACE:
    logger.add(
        f"logs/scoring_{SESSION_ID}.jsonl",
        level="DEBUG",
        filter=is_scoring_trace,
        serialize=True,
        rotation="50 MB",
        retention="7 days",
    )


def get_logger(name: str):
    """Get a named logger instance."""
    return logger.bind(name=name)

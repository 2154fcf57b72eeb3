"""
Structured logging configuration for pity ledger.

Provides JSON or text logs with a trace_id field so that records from one
replay or import (keyed by pull log path) can be correlated.

Environment Variables:
    PITYLEDGER_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR) - default: INFO
    PITYLEDGER_LOG_FORMAT: Log format (json, text) - default: text

Usage:
    from pityledger.logging_config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__, trace_id="/data/pulls.jsonl")
    logger.info("Imported pulls", extra={"count": 10})
"""

import logging
import os
import sys
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure the pityledger logger.

    Arguments override the environment:
    - PITYLEDGER_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    - PITYLEDGER_LOG_FORMAT: json, text (default: text)

    Logs go to stderr so that --json command output on stdout stays parseable.
    """
    log_level = (level or os.getenv("PITYLEDGER_LOG_LEVEL", "INFO")).upper()
    fmt = (log_format or os.getenv("PITYLEDGER_LOG_FORMAT", "text")).lower()
    resolved = LEVEL_MAP.get(log_level, logging.INFO)

    logger = logging.getLogger("pityledger")
    logger.setLevel(resolved)
    logger.propagate = False

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved)
    handler.addFilter(TraceIDFilter())

    if fmt == "json":
        formatter = JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s %(trace_id)s",
            rename_fields={
                "asctime": "timestamp",
                "name": "logger",
                "levelname": "level",
            },
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s [trace_id=%(trace_id)s]",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    logger.addHandler(handler)


def get_logger(name: str, trace_id: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Get a logger with optional trace_id for correlation.

    Args:
        name: Logger name (typically __name__)
        trace_id: Trace ID for correlating logs (typically the pull log path)

    Example:
        logger = get_logger(__name__, trace_id="pulls.jsonl")
        logger.info("Replayed pulls")
        # Output (JSON): {"timestamp": "...", "level": "INFO", "message": "Replayed pulls", "trace_id": "pulls.jsonl"}
    """
    logger = logging.getLogger(name)
    return logging.LoggerAdapter(logger, {"trace_id": trace_id or "N/A"})


class TraceIDFilter(logging.Filter):
    """
    Logging filter that adds trace_id to all log records.

    Ensures all logs have a trace_id field, even if not set via LoggerAdapter.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            record.trace_id = "N/A"  # type: ignore
        return True

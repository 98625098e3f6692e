"""Logging setup for the CreditPace CLI.

Human-readable output goes through rich's RichHandler on stderr. Setting
CREDITPACE_LOG_FORMAT=json switches to structured JSON lines.
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any

from pythonjsonlogger.json import JsonFormatter
from rich.console import Console
from rich.logging import RichHandler


class CreditPaceJsonFormatter(JsonFormatter):
    """JSON formatter with timestamp, level and service name."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "creditpace"


def setup_logging(level: str = "WARNING", fmt: str = "rich") -> None:
    """Configure the root logger. Safe to call more than once."""
    logger = logging.getLogger()
    logger.setLevel(level.upper())
    logger.handlers.clear()

    handler: logging.Handler
    if fmt == "json":
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(CreditPaceJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False)
    logger.addHandler(handler)

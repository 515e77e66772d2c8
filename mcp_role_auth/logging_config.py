"""
Structured JSON logging.

One JSON object per log line, so log collectors can index fields like
role, tool and decision. Structured data is attached with:

    logger.info("Tool call authorized", extra={"auth_data": {"role": "editor", ...}})

Logs go to stderr: with the stdio transport, stdout carries the MCP
protocol itself and must not be written to.
"""

import json
import logging
import sys
from typing import TextIO


class JSONLogFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Example output:

        {"timestamp": "2026-02-06 10:30:00,123", "level": "WARNING", "logger": "mcp-role-auth",
         "message": "Tool call denied", "role": "viewer", "tool": "create_user", "decision": "denied"}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Merge any extra fields passed via logger.info("msg", extra={"auth_data": {...}})
        if hasattr(record, "auth_data"):
            log_entry.update(record.auth_data)
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def configure_logging(level: str = "info", stream: TextIO | None = None) -> None:
    """Install the JSON formatter on the root logger."""
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JSONLogFormatter())

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[handler],
        force=True,
    )

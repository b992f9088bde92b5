"""Centralized logging configuration."""
import json
import logging
import sys
from datetime import datetime, timezone


def setup_logging(level: str = "INFO", format_type: str = "text") -> None:
    """Configure the root logger with a single stdout handler."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    if format_type == "json":
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    # force=True so Streamlit reruns don't stack handlers
    logging.basicConfig(level=numeric_level, handlers=[handler], force=True)


class JsonFormatter(logging.Formatter):
    """Format logs as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)

"""
DocForge Logging
Console logging in text or JSON-lines form, configured from the environment
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Optional


# Top-level packages whose module loggers (logging.getLogger(__name__)) we own
PACKAGE_LOGGERS = ("docforge", "core", "injection", "agents", "tools")


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record):
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Add extra fields
        for attr in ("document", "header", "duration_ms"):
            if hasattr(record, attr):
                log_data[attr] = getattr(record, attr)

        return json.dumps(log_data, ensure_ascii=False)


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> logging.Logger:
    """Configure logging based on environment"""
    log_format = log_format or os.environ.get("LOG_FORMAT", "text")  # "json" or "text"
    log_level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()

    handler = logging.StreamHandler()
    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        ))

    for name in PACKAGE_LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(getattr(logging, log_level, logging.INFO))
        # Remove existing handlers
        logger.handlers = [handler]
        logger.propagate = False

    return logging.getLogger("docforge")

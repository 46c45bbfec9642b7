"""
Logging for SPECTRE.

Loggers write to the console and to ``SPECTRE_LOG_FILE``, as JSON lines or
plain text depending on ``SPECTRE_LOG_FORMAT``. Structured per-call fields
go through ``extra=log_fields(...)`` and show up as top-level JSON keys.
"""

import logging
import json
import sys
from pathlib import Path
from datetime import datetime, timezone
from typing import Any, Dict, List

FIELDS_ATTR = "extra_fields"


class JSONFormatter(logging.Formatter):
    """One JSON object per record"""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        log_obj.update(getattr(record, FIELDS_ATTR, {}))

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, default=str)


class TextFormatter(logging.Formatter):
    """Plain text with structured fields appended as key=value"""

    def __init__(self):
        super().__init__("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = getattr(record, FIELDS_ATTR, None)
        if fields:
            line += " | " + " ".join(f"{key}={value}" for key, value in fields.items())
        return line


def log_fields(**fields: Any) -> Dict[str, Dict[str, Any]]:
    """Build the ``extra`` argument carrying structured fields"""
    return {FIELDS_ATTR: fields}


def _build_handlers(log_file: str, log_format: str) -> List[logging.Handler]:
    formatter = JSONFormatter() if log_format == "json" else TextFormatter()

    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)

    handlers = [logging.StreamHandler(sys.stdout), logging.FileHandler(path)]
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def get_logger(name: str = "spectre") -> logging.Logger:
    """
    Get a configured logger; handlers are attached only on first use.

    Args:
        name: Logger name, usually ``__name__``
    """
    from .config import config

    logger = logging.getLogger(name)

    if not logger.handlers:
        logger.setLevel(getattr(logging, config.LOG_LEVEL.upper(), logging.INFO))
        for handler in _build_handlers(config.LOG_FILE, config.LOG_FORMAT):
            logger.addHandler(handler)
        logger.propagate = False

    return logger

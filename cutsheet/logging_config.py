"""Logging configuration."""

import json
import logging
import sys
from typing import Any

logger = logging.getLogger(__name__)

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for log collectors."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if hasattr(record, "filename_uploaded"):
            log_obj["file"] = record.filename_uploaded
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_obj, ensure_ascii=False)


def setup_logging(log_level: str = "INFO", log_format: str = "text") -> None:
    """
    Configure the root logger with a single stdout handler.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR
        log_format: "text" for humans, "json" for log collectors
    """
    level = getattr(logging, log_level.upper())
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    if log_format.lower() == "json":
        console_handler.setFormatter(JsonFormatter(datefmt="%Y-%m-%dT%H:%M:%S"))
    else:
        console_handler.setFormatter(logging.Formatter(fmt=TEXT_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    for logger_name in ("uvicorn.access", "multipart", "python_multipart", "charset_normalizer"):
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    logger.info("Logging configured | level=%s | format=%s", log_level, log_format)

"""
Matching Engine Logging
Structured log output for processes that embed the engine.

Engine records carry their context (project_id, candidate counts, timings)
as `extra` fields. JSONFormatter lifts them to top-level keys; the text
format appends them as key=value pairs.
"""
import json
import logging
import sys
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

PACKAGE_LOGGER = "talent_matching"

# Attributes every LogRecord carries; anything else was passed through `extra`
_RESERVED_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def record_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Fields attached to a record through `extra`"""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with engine context as top-level keys"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(record_fields(record))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Single-line text: time, level, logger, message, then key=value context"""

    def __init__(self):
        super().__init__("%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s", datefmt="%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = record_fields(record)
        if fields:
            line += " │ " + " ".join(f"{key}={value}" for key, value in sorted(fields.items()))
        return line


def setup_logging(
    level: str = "INFO",
    json_format: bool = False,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Attach handlers to the package logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: JSON lines on stdout instead of text
        log_file: Optional file path, always written as JSON lines

    Returns:
        The configured `talent_matching` logger
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, level.upper()))

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(JSONFormatter() if json_format else TextFormatter())
    package_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(JSONFormatter())
        package_logger.addHandler(file_handler)

    return package_logger


def setup_logging_from_settings(settings) -> logging.Logger:
    """Configure the package logger from a Settings instance"""
    return setup_logging(
        level=settings.log_level,
        json_format=settings.log_json,
        log_file=settings.log_file,
    )


class PerformanceLogger:
    """
    Times a block and logs it with the caller's context fields.

    Usage:
        with PerformanceLogger(logger, "find_matches", threshold_ms=250, project_id=project.id):
            results = engine.find_matches(project, candidates)

    Above `threshold_ms` the record is a WARNING, otherwise DEBUG. Both carry
    `operation`, `duration_ms` and any keyword fields given here.
    """

    def __init__(self, logger: logging.Logger, operation: str, threshold_ms: float = 100, **fields: Any):
        self.logger = logger
        self.operation = operation
        self.threshold_ms = threshold_ms
        self.fields = fields
        self.start_time: Optional[float] = None
        self.duration_ms: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is None:
            return False

        self.duration_ms = (time.perf_counter() - self.start_time) * 1000
        extra = {
            "operation": self.operation,
            "duration_ms": round(self.duration_ms, 2),
            **self.fields,
        }
        if exc_type is not None:
            extra["failed"] = exc_type.__name__

        if self.duration_ms > self.threshold_ms:
            self.logger.warning(
                f"Slow operation: {self.operation} took {self.duration_ms:.2f}ms", extra=extra
            )
        else:
            self.logger.debug(f"{self.operation} completed in {self.duration_ms:.2f}ms", extra=extra)

        return False

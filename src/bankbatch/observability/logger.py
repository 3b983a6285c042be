"""
Structured logging for bankbatch

Every module logs through a child of the ``bankbatch`` package logger
(``get_logger(__name__)``). Only the package logger owns a handler, so one
call to ``setup_logger`` reconfigures the whole library. Records are emitted
as JSON by python-json-logger, or as plain text when LOG_FORMAT=text.
"""
import logging
import os
import sys
import time
from typing import TextIO

from pythonjsonlogger import jsonlogger

PACKAGE_LOGGER = "bankbatch"

JSON_FORMAT = "%(timestamp)s %(level)s %(logger)s %(message)s"
TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


class BatchJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter for batch runs

    Every line carries timestamp, level, logger and the source location;
    structured extras (operation, record_count, bank, ...) are kept as-is.
    """

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = log_record.get("timestamp") or self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["location"] = f"{record.module}:{record.funcName}:{record.lineno}"


def _resolve_level(level: str | None) -> int:
    name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def build_formatter(format_type: str) -> logging.Formatter:
    """Formatter for "json" (default) or "text" output."""
    if format_type == "text":
        return logging.Formatter(fmt=TEXT_FORMAT, datefmt=DATE_FORMAT)
    return BatchJsonFormatter(fmt=JSON_FORMAT, datefmt=DATE_FORMAT)


def setup_logger(
    level: str | None = None,
    format_type: str | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Configure the package logger

    Calling it again replaces the previous handler.

    Args:
        level: Log level name, defaults to $LOG_LEVEL, then INFO
        format_type: "json" or "text", defaults to $LOG_FORMAT, then json
        stream: Output stream (stderr if None)

    Returns:
        The configured ``bankbatch`` logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(_resolve_level(level))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(build_formatter(format_type or os.getenv("LOG_FORMAT", "json")))
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """
    Get a logger below the package logger

    The package logger is configured from the environment on first use.

    Args:
        name: Logger name, normally the calling module's ``__name__``
    """
    if not logging.getLogger(PACKAGE_LOGGER).handlers:
        setup_logger()
    return logging.getLogger(name)


class log_operation:
    """
    Context manager timing one pipeline step

    Logs the start at DEBUG and the outcome at INFO, or at ERROR when the
    block raises (the exception still propagates). Keyword arguments, and
    fields added with ``annotate`` inside the block, travel as extras.

    Usage:
        with log_operation("Loading sources", logger=logger, source_count=2) as op:
            records = load()
            op.annotate(record_count=len(records))
    """

    def __init__(self, operation_name: str, logger: logging.Logger | None = None, **fields):
        self.operation_name = operation_name
        self.logger = logger or get_logger()
        self.fields = {"operation": operation_name, **fields}
        self._started = 0.0

    def annotate(self, **fields) -> None:
        """Attach fields to the completion line."""
        self.fields.update(fields)

    def __enter__(self):
        self._started = time.perf_counter()
        self.logger.debug(f"Starting: {self.operation_name}", extra=self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.fields["duration_seconds"] = round(time.perf_counter() - self._started, 3)

        if exc_type is None:
            self.logger.info(
                f"Completed: {self.operation_name}",
                extra={**self.fields, "status": "success"},
            )
        else:
            self.logger.error(
                f"Failed: {self.operation_name}",
                extra={
                    **self.fields,
                    "status": "error",
                    "error_type": exc_type.__name__,
                    "error_message": str(exc_val),
                },
            )
        return False

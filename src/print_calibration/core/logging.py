"""
Centralized logging configuration for the print calibration engine.

JSON or plain console output, an optional JSON log file, and context
managers that tag messages with the printer and profile being worked on.
Nothing is configured until setup_logging is called.

Usage:
    from print_calibration.core.logging import get_logger, setup_logging

    setup_logging(level="DEBUG")

    logger = get_logger(__name__)
    logger.info("Correcting image", extra={"operation": "correct"})
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator

PACKAGE_LOGGER = "print_calibration"

# Context variable for per-job tagging (printer, profile, job)
_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON.

        Args:
            record: The log record to format.

        Returns:
            JSON-formatted string.
        """
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        ctx = _log_context.get()
        if ctx:
            log_data["context"] = ctx

        for attr in ("operation", "path", "printer_name", "profile_id", "duration_seconds"):
            if hasattr(record, attr):
                log_data[attr] = getattr(record, attr)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
            log_data["exception_type"] = record.exc_info[0].__name__ if record.exc_info[0] else None

        return json.dumps(log_data, default=str)


class ColoredFormatter(logging.Formatter):
    """Colored console formatter for development."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        # Work on a copy so other handlers see the plain level name
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname, "")
        record.levelname = f"{color}{record.levelname:8}{self.RESET}"
        return super().format(record)


CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
CONSOLE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _console_formatter(json_format: bool, colored: bool) -> logging.Formatter:
    if json_format:
        return JSONFormatter()
    if colored and sys.stderr.isatty():
        # ColoredFormatter pads the level name itself
        return ColoredFormatter(CONSOLE_FORMAT.replace("-8s", "s"), datefmt="%H:%M:%S")
    return logging.Formatter(CONSOLE_FORMAT, datefmt=CONSOLE_DATEFMT)


def setup_logging(
    level: str | None = None,
    log_file: Path | None = None,
    json_format: bool = False,
    colored: bool = True,
) -> None:
    """Configure the package logger.

    Handlers go on the ``print_calibration`` logger only, so embedding
    applications keep control of the root logger. Calling again replaces
    the previous handlers. Console output goes to stderr, keeping stdout
    free for command output.

    Args:
        level: Log level name. Defaults to ``Settings.log_level``.
        log_file: Optional file that receives JSON lines at DEBUG.
        json_format: Use JSON lines on the console too.
        colored: Colorize level names when stderr is a terminal.
    """
    # Import here to avoid circular imports
    from print_calibration.config import get_settings

    level = (level or get_settings().log_level).upper()

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, level))
    for handler in package_logger.handlers:
        handler.close()
    package_logger.handlers.clear()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(_console_formatter(json_format, colored))
    package_logger.addHandler(console)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JSONFormatter())
        package_logger.addHandler(file_handler)

    package_logger.debug("Logging configured: level=%s, file=%s, json=%s", level, log_file, json_format)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Logger namespaced under the package logger.
    """
    if not name.startswith(PACKAGE_LOGGER):
        name = f"{PACKAGE_LOGGER}.{name}"

    return logging.getLogger(name)


class LogContext:
    """Context manager for adding context to log messages.

    Example:
        with LogContext(printer_name="EPSON ET-8550", profile_id=3):
            logger.info("Printing card")  # JSON output includes context
    """

    def __init__(self, **context: Any):
        self.context = context
        self._token = None

    def __enter__(self) -> "LogContext":
        current = _log_context.get()
        self._token = _log_context.set({**current, **self.context})
        return self

    def __exit__(self, *args: Any) -> None:
        if self._token is not None:
            _log_context.reset(self._token)


def get_log_context() -> dict[str, Any]:
    """Return a copy of the active log context."""
    return dict(_log_context.get())


@contextmanager
def log_operation(
    logger: logging.Logger,
    operation: str,
    level: int = logging.INFO,
) -> Iterator[None]:
    """Log operation start/end with timing.

    Args:
        logger: Logger to use.
        operation: Operation name for logging.
        level: Log level for messages.

    Example:
        with log_operation(logger, "apply_calibration"):
            ...
    """
    start = time.perf_counter()
    logger.log(level, "Starting: %s", operation)
    try:
        yield
    except Exception as e:
        elapsed = time.perf_counter() - start
        logger.error(
            "Failed: %s (%s: %s)",
            operation,
            type(e).__name__,
            e,
            extra={"operation": operation, "duration_seconds": round(elapsed, 4)},
        )
        raise
    elapsed = time.perf_counter() - start
    logger.log(
        level,
        "Completed: %s in %.3fs",
        operation,
        elapsed,
        extra={"operation": operation, "duration_seconds": round(elapsed, 4)},
    )

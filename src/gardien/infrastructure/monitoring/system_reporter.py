"""
System Reporter - centralized logging for Gardien.

Thin wrapper over the standard logging module with verbose-level
filtering and a context tag on every line. Logs to stdout always and
to a file when a log directory is configured.
"""

import logging
import os
import sys
import uuid
from contextvars import ContextVar
from typing import Optional

# Request ID of the HTTP request currently being served
request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def set_request_id(request_id: Optional[str] = None) -> str:
    """
    Set the request ID for the current context.

    Args:
        request_id: Request ID to use (generated when None)

    Returns:
        The request ID now in effect
    """
    request_id = request_id or uuid.uuid4().hex
    request_id_ctx.set(request_id)
    return request_id


def get_request_id() -> Optional[str]:
    """Get the request ID for the current context."""
    return request_id_ctx.get()


class SystemReporter:
    """
    Logger with verbose filtering.

    Verbose Levels:
        0 = Critical only (always visible)
        1 = Important messages (default)
        2 = Detailed information
        3 = Debug/verbose
    """

    def __init__(
        self,
        name: str = "gardien",
        log_dir: Optional[str] = None,
        level: int = logging.INFO,
        verbose: int = 1,
    ) -> None:
        """
        Initialize SystemReporter.

        Args:
            name: Logger name (used for filename if log_dir provided)
            log_dir: Directory for log files. If None, logs to stdout only.
            level: Python logging level
            verbose: Verbosity filter (0-3)
        """
        self.name = name
        self.verbose = verbose
        self.log_file: Optional[str] = None
        self._init_logger(name, log_dir, level)

    def _init_logger(self, name: str, log_dir: Optional[str], level: int) -> None:
        """
        Initialize logger with console and optional file handlers.

        Args:
            name: Logger name
            log_dir: Log directory path (None = stdout only)
            level: Python logging level
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self.logger.handlers.clear()
        self.logger.propagate = False

        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            self.log_file = os.path.join(log_dir, f"{name}.log")

            file_handler = logging.FileHandler(self.log_file, encoding="utf-8")
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    def _should_log(self, verbose_level: int) -> bool:
        """Check if message should be logged."""
        return self.verbose >= verbose_level

    def _format(self, msg: str, context: str) -> str:
        """Prefix message with context and request ID."""
        request_id = get_request_id()
        if request_id:
            return f"[{context}] [{request_id[:8]}] {msg}"
        return f"[{context}] {msg}"

    # Core logging methods
    def debug(self, msg: str, context: str = "system", verbose_level: int = 3) -> None:
        """Log debug message."""
        if self._should_log(verbose_level):
            self.logger.debug(self._format(msg, context))

    def info(self, msg: str, context: str = "system", verbose_level: int = 1) -> None:
        """Log info message."""
        if self._should_log(verbose_level):
            self.logger.info(self._format(msg, context))

    def warning(
        self, msg: str, context: str = "system", verbose_level: int = 1
    ) -> None:
        """Log warning message."""
        if self._should_log(verbose_level):
            self.logger.warning(self._format(msg, context))

    def error(
        self,
        msg: str,
        context: str = "system",
        verbose_level: int = 0,
        exc_info=False,
    ) -> None:
        """Log error message, with a traceback when exc_info is True or an exception."""
        if self._should_log(verbose_level):
            self.logger.error(self._format(msg, context), exc_info=exc_info)

    def critical(
        self, msg: str, context: str = "system", verbose_level: int = 0
    ) -> None:
        """Log critical message."""
        if self._should_log(verbose_level):
            self.logger.critical(self._format(msg, context))

"""
Logger Utility
==============

Context-aware logging for Switchboard. Every component creates its own
logger with a short context name, so a single request can be followed from
the router through the registry into an agent's tool loop:

    [2025-01-31T10:30:00] [INFO] [Router] Classified as work/github (0.90)
    [2025-01-31T10:30:00] [INFO] [Engine:github-agent] Iteration 1
    [2025-01-31T10:30:01] [INFO] [ToolExecutor] Executing tool: list_pull_requests

Features:
1. Log levels (DEBUG, INFO, WARNING, ERROR)
2. Timestamps and context prefixes
3. Child loggers for nested contexts
4. Optional structured data printed as JSON
5. Color-coded terminal output

The minimum level comes from LOG_LEVEL and can be changed at runtime with
set_log_level() (the application context does this from its config).

Usage:
    from switchboard.utils.logger import Logger

    logger = Logger("Registry")
    logger.info("Dispatching task", {"task_id": task.id})
"""

import json
import os
import sys
from datetime import datetime
from enum import IntEnum
from typing import Any


class LogLevel(IntEnum):
    """
    Log levels with numeric values for comparison.
    Higher values = more severe = always shown.
    """
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40


class Colors:
    """ANSI escape codes for colored terminal output."""
    RESET = "\033[0m"
    DEBUG = "\033[36m"    # Cyan
    INFO = "\033[32m"     # Green
    WARNING = "\033[33m"  # Yellow
    ERROR = "\033[31m"    # Red
    DIM = "\033[2m"       # Dimmed text


_LEVEL_NAMES = {
    "DEBUG": LogLevel.DEBUG,
    "INFO": LogLevel.INFO,
    "WARNING": LogLevel.WARNING,
    "WARN": LogLevel.WARNING,
    "ERROR": LogLevel.ERROR,
}


def parse_log_level(value: str | None) -> LogLevel:
    """
    Parse a level name such as "debug" or "WARN".

    Args:
        value: The level name (case-insensitive)

    Returns:
        LogLevel: The matching level, defaults to INFO
    """
    if not value:
        return LogLevel.INFO
    return _LEVEL_NAMES.get(value.upper(), LogLevel.INFO)


# Process-wide minimum level shared by all Logger instances
_min_level: LogLevel = parse_log_level(os.getenv("LOG_LEVEL"))


def set_log_level(level: str | LogLevel) -> None:
    """
    Change the minimum level for every logger.

    Args:
        level: A LogLevel or a level name
    """
    global _min_level
    _min_level = level if isinstance(level, LogLevel) else parse_log_level(level)


def get_log_level() -> LogLevel:
    """Get the current minimum level."""
    return _min_level


class Logger:
    """
    A context-aware logger with colored output.

    The logger supports:
    - Multiple log levels (debug, info, warning, error)
    - Context prefixes for tracing through code
    - Optional structured data as JSON
    - Child loggers for nested contexts

    Example:
        logger = Logger("Engine")
        logger.info("Starting task")

        agent_logger = logger.child("github-agent")
        agent_logger.debug("Tool call", {"name": "list_pull_requests"})
    """

    def __init__(self, context: str = ""):
        """
        Initialize a logger with an optional context.

        Args:
            context: A string prefix for all log messages (e.g., "Router", "Engine")
        """
        self.context = context

    def child(self, child_context: str) -> "Logger":
        """
        Create a child logger with additional context.

        Args:
            child_context: Additional context to append

        Returns:
            A new Logger with combined context (e.g. [Engine:chat-agent])
        """
        new_context = f"{self.context}:{child_context}" if self.context else child_context
        return Logger(new_context)

    def _format_message(
        self,
        level: str,
        message: str,
        color: str
    ) -> str:
        """
        Format a log message with timestamp, level, and context.

        Output format: [TIMESTAMP] [LEVEL] [context] message
        """
        timestamp = datetime.now().isoformat(timespec="seconds")
        context_str = f"[{self.context}] " if self.context else ""

        return (
            f"{Colors.DIM}[{timestamp}]{Colors.RESET} "
            f"{color}[{level}]{Colors.RESET} "
            f"{context_str}{message}"
        )

    def _log(
        self,
        level: LogLevel,
        level_name: str,
        color: str,
        message: str,
        data: dict[str, Any] | None = None
    ) -> None:
        if level < _min_level:
            return

        formatted = self._format_message(level_name, message, color)

        # Errors go to stderr, everything else to stdout
        stream = sys.stderr if level >= LogLevel.ERROR else sys.stdout
        print(formatted, file=stream)

        if data:
            data_str = json.dumps(data, indent=2, default=str)
            print(f"{Colors.DIM}{data_str}{Colors.RESET}", file=stream)

    def debug(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log a debug message (only shown when LOG_LEVEL=DEBUG)."""
        self._log(LogLevel.DEBUG, "DEBUG", Colors.DEBUG, message, data)

    def info(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log an info message."""
        self._log(LogLevel.INFO, "INFO", Colors.INFO, message, data)

    def warning(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log a warning message."""
        self._log(LogLevel.WARNING, "WARN", Colors.WARNING, message, data)

    def error(self, message: str, error: Exception | None = None) -> None:
        """
        Log an error message.

        Errors are always shown regardless of log level.

        Args:
            message: The error message
            error: Optional exception to include details from
        """
        data = None
        if error:
            data = {
                "error_type": type(error).__name__,
                "error_message": str(error),
            }
        self._log(LogLevel.ERROR, "ERROR", Colors.ERROR, message, data)


# Default logger instance for general use
logger = Logger("Switchboard")

"""Logging utilities for the assistant agent."""

import logging
import sys
from typing import TextIO

_LOGGER_NAME = "assistant_agent"


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance for the agent.

    Module names that already live under the agent package (``__name__``) are used as-is,
    anything else becomes a child of the agent's root logger.

    Args:
        name: Optional sub-logger name. If None, returns the root agent logger.

    Returns:
        The requested logger.
    """
    if not name:
        return logging.getLogger(_LOGGER_NAME)
    if name == _LOGGER_NAME or name.startswith(f"{_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")


def setup_logging(
    level: int | str = logging.INFO,
    format_str: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream: TextIO | None = None,
) -> None:
    """Setup default logging configuration for the agent.

    This adds a StreamHandler to the agent's root logger.
    Should typically be called by the application using the package, not the package itself,
    unless running as a standalone script.

    Args:
        level: Logging level (number or name such as ``"WARNING"``).
        format_str: Log format string.
        stream: Target stream. Defaults to stderr so logs do not mix with the conversation output.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)

    # Avoid adding multiple handlers if called multiple times
    if any(not isinstance(h, logging.NullHandler) for h in logger.handlers):
        return

    handler = logging.StreamHandler(stream or sys.stderr)
    formatter = logging.Formatter(format_str)
    handler.setFormatter(formatter)
    logger.addHandler(handler)


# Set default NullHandler to avoid "No handler found" warnings
logging.getLogger(_LOGGER_NAME).addHandler(logging.NullHandler())

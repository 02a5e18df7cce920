"""Logging setup for the engine and its entry point.

stdout is reserved for the MCP stream, so console output goes to stderr.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", logs_dir: Path | str | None = None) -> logging.Logger:
    """Configure the ``hubmcp`` logger.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        logs_dir: When set, write ``error.log`` (WARNING and up) and
            ``mcp.log`` there instead of logging to stderr

    Returns:
        The configured package logger
    """
    logger = logging.getLogger("hubmcp")
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()
    formatter = logging.Formatter(FORMAT, datefmt=DATE_FORMAT)

    if logs_dir:
        logs_path = Path(logs_dir)
        logs_path.mkdir(parents=True, exist_ok=True)
        error_handler = logging.FileHandler(logs_path / "error.log")
        error_handler.setLevel(logging.WARNING)
        main_handler = logging.FileHandler(logs_path / "mcp.log")
        main_handler.setLevel(logging.INFO)
        handlers: list[logging.Handler] = [error_handler, main_handler]
    else:
        handlers = [logging.StreamHandler(sys.stderr)]

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger

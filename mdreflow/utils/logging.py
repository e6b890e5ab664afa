from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "mdreflow"
LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def parse_level(level: str) -> int:
    """Map a level name to its ``logging`` number; unknown names are a ValueError."""
    level_name = level.upper()
    if level_name not in LEVELS:
        raise ValueError(f"Unknown log level {level!r}, expected one of {', '.join(LEVELS)}")
    return getattr(logging, level_name)


def setup_logger(level: str = "INFO") -> logging.Logger:
    numeric_level = parse_level(level)
    # stdout is left to the formatted output of scripts
    console = Console(stderr=True, highlight=False)
    handler = RichHandler(console=console, show_time=False, show_path=False, rich_tracebacks=True)
    logging.basicConfig(level=numeric_level, format="%(message)s", handlers=[handler])
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or LOGGER_NAME)

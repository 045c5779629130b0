"""
Rich logging for paperdesk.

Provides colorful console logging through the rich library.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


def _build_rich_handler(console: Optional[Console] = None) -> RichHandler:
    """Create a rich handler with the paperdesk format."""
    rich_handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=True,
        show_path=True,
        markup=False,
        rich_tracebacks=True
    )

    formatter = logging.Formatter(
        fmt="%(message)s",
        datefmt="[%X]"
    )

    rich_handler.setFormatter(formatter)
    return rich_handler


def setup_logging(level: str = "INFO", use_rich: bool = True,
                  console: Optional[Console] = None) -> None:
    """
    Setup logging for the application.

    Args:
        level: Log level
        use_rich: Whether to use rich logging
        console: Optional console to log to (defaults to stderr)
    """
    if level.upper() not in ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']:
        raise ValueError(f"Invalid log level: {level}")

    numeric_level = getattr(logging, level.upper())

    if use_rich:
        root_logger = logging.getLogger()
        root_logger.setLevel(numeric_level)
        root_logger.handlers.clear()
        root_logger.addHandler(_build_rich_handler(console))
    else:
        logging.basicConfig(
            level=numeric_level,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S',
            force=True
        )

    logging.getLogger(__name__).debug(f"Logging initialized at {level} level")

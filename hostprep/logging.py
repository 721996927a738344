"""
Logging for hostprep.

Example:
    from hostprep.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Reading current host name")
    logger.warning("Name exceeds legacy length")
    logger.error("Rename failed", exc_info=True)
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.theme import Theme

HOSTPREP_THEME = Theme({
    "log.time": "dim cyan",
    "log.level.debug": "dim blue",
    "log.level.info": "green",
    "log.level.warning": "yellow",
    "log.level.error": "bold red",
    "log.level.critical": "bold white on red",
    "hostprep.success": "bold green",
    "hostprep.action.update": "yellow",
    "hostprep.action.none": "dim",
    "hostprep.failed": "bold red",
    "hostprep.advisory": "bold yellow",
})

console = Console(theme=HOSTPREP_THEME, stderr=True)

_initialized = False


def setup_logging(
    level: str = "INFO",
    show_time: bool = True,
    show_path: bool = False,
    rich_tracebacks: bool = True,
) -> None:
    """
    init hostprep's console logging

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        show_time: Show timestamps in log output
        show_path: Show file path in log output
        rich_tracebacks: Use rich formatting for tracebacks

    Note:
        Only the first call takes effect. Use reset_logging() in tests.
    """
    global _initialized

    if _initialized:
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = RichHandler(
        console=console,
        show_time=show_time,
        show_path=show_path,
        rich_tracebacks=rich_tracebacks,
        markup=False,
    )
    handler.setLevel(numeric_level)
    handler.setFormatter(
        logging.Formatter(
            "%(message)s",
            datefmt="[%X]",
        )
    )

    logging.basicConfig(
        level=numeric_level,
        handlers=[handler],
        force=True,
    )

    _initialized = True


def reset_logging() -> None:
    """Allow setup_logging() to run again (useful for testing)."""
    global _initialized
    _initialized = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a given module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    if not _initialized:
        setup_logging()

    return logging.getLogger(name)


class HostLogger:
    """
    hostprep-specific logger

    Wraps a standard logger with console helpers for apply output.
    """

    def __init__(self, name: str):
        self.logger = get_logger(name)
        self.console = console

    def debug(self, message: str, *args, **kwargs) -> None:
        self.logger.debug(message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs) -> None:
        self.logger.info(message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs) -> None:
        self.logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs) -> None:
        self.logger.error(message, *args, **kwargs)

    def success(self, message: str) -> None:
        """Print a success line with a check mark."""
        self.console.print(f"[hostprep.success]✓[/hostprep.success] {escape(message)}")

    def failure(self, message: str) -> None:
        """Print a failure line with a cross."""
        self.console.print(f"[hostprep.failed]✗[/hostprep.failed] {escape(message)}")

    def action(self, action: str, target: str, details: Optional[str] = None) -> None:
        """
        Print a planned or applied action.

        Args:
            action: Action type (update, none)
            target: Attribute being managed, e.g. "hostname"
            details: Optional details such as "OLD → NEW"
        """
        symbols = {
            "update": "~",
            "none": " ",
        }
        symbol = symbols.get(action.lower(), "•")
        style = f"hostprep.action.{action.lower()}"

        msg = f"[{style}]{symbol}[/{style}] {escape(target)}"
        if details:
            msg += f" [dim]({escape(details)})[/dim]"

        self.console.print(msg)

    def advisory(self, message: str) -> None:
        """Print advisory text, e.g. a pending restart notice."""
        self.console.print(f"[hostprep.advisory]![/hostprep.advisory] {escape(message)}")


def get_host_logger(name: str) -> HostLogger:
    """
    Get a HostLogger instance for the given module.

    Example:
        logger = get_host_logger(__name__)
        logger.success("Host name applied")
        logger.action("update", "hostname", "WIN-DEFAULT → LAB-WIN11-01")
    """
    return HostLogger(name)

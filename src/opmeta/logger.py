"""Logging for opmeta with rich console output."""

import json
import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler


class OpMetaLogger(logging.Logger):
    """
    Logger that writes records through rich and offers a few console helpers
    for command line summaries (success, hint, rule, print_dict, key_value).
    """

    def __init__(self, name: str, level: int = logging.INFO) -> None:
        super().__init__(name, level)
        self.console = Console()

        handler = RichHandler(
            console=self.console,
            rich_tracebacks=True,
            show_time=True,
            show_path=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        self.addHandler(handler)

    def print(self, message: str) -> None:
        """Print a plain message (rich markup is supported)."""
        self.console.print(message)

    def success(self, message: str) -> None:
        """Print a success message in green with a checkmark."""
        self.print(f"[green]✓[/green] {message}")

    def hint(self, message: str) -> None:
        """Print a dimmed secondary message."""
        self.print(f"[dim]{message}[/dim]")

    def rule(self, title: str, style: str = "bold blue") -> None:
        """
        Print a horizontal rule with a title.

        Args:
            title: Title text for the rule
            style: Rich style string (default: "bold blue")
        """
        self.console.rule(f"[{style}]{title}")

    def print_dict(self, data: dict[str, Any]) -> None:
        """Print dictionary data as highlighted JSON."""
        self.console.print_json(json.dumps(data, indent=2))

    def key_value(self, key: str, value: Any, key_style: str = "dim") -> None:
        """
        Print a formatted key-value pair, e.g. "Operations: 3".

        Args:
            key: The key/label to display
            value: The value to display
            key_style: Style for the key (default: "dim")
        """
        self.print(f"[{key_style}]{key}:[/{key_style}] {value}")


def get_logger(name: str = "opmeta") -> OpMetaLogger:
    """
    Get or create an opmeta logger instance.

    Args:
        name: Logger name (default: "opmeta")

    Returns:
        OpMetaLogger instance
    """
    logging.setLoggerClass(OpMetaLogger)
    try:
        logger = logging.getLogger(name)
    finally:
        logging.setLoggerClass(logging.Logger)

    return logger  # type: ignore[return-value]

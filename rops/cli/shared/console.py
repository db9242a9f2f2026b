"""Shared console utilities for CLI commands.

This module provides the rich console wrapper used for user-facing output
and the error handling decorator every command is wrapped with.
"""

import json
from collections.abc import Callable
from functools import wraps
from typing import Any

import typer
from loguru import logger
from rich.console import Console, ConsoleRenderable
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from rops.errors import DeploymentError


class CLIConsole:
    """Rich console wrapper for consistent CLI output."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize the CLI console."""
        self.console = console or Console()

    def print(self, msg: ConsoleRenderable | str | None = None) -> None:
        self.console.print(msg)

    def info(self, msg: str) -> None:
        self.console.print(f"[cyan]ℹ[/cyan]  {msg}")

    def ok(self, msg: str) -> None:
        self.console.print(f"[green]✅[/green] {msg}")

    def error(self, msg: str) -> None:
        self.console.print(f"[red]❌[/red] {msg}")

    def warn(self, msg: str) -> None:
        self.console.print(f"[yellow]⚠️[/yellow]  {msg}")

    def print_json(self, data: Any) -> None:
        """Print data as indented JSON, without rich markup processing."""
        self.console.print_json(json.dumps(data))

    def handle_error(
        self, message: str, details: str | None = None, exit_code: int = 1
    ) -> None:
        """Handle an error by printing a message and exiting.

        Args:
            message: Error message to display
            details: Optional additional details
            exit_code: Exit code to use
        """
        self.error(f"[bold red]{escape(message)}[/bold red]")
        if details:
            panel = Panel(Text(details), title="Details", border_style="red")
            self.console.print(panel)
        raise typer.Exit(exit_code)


def with_error_handling(func: Callable[..., None]) -> Callable[..., None]:
    """Decorator to wrap command functions with standard error handling.

    Args:
        func: The command function to wrap

    Returns:
        Wrapped function with error handling
    """

    @wraps(func)
    def wrapper(*args: object, **kwargs: object) -> None:
        try:
            func(*args, **kwargs)
        except DeploymentError as e:
            logger.debug(f"{type(e).__name__}: {e.message}")
            console.handle_error(e.message, e.details)
        except KeyboardInterrupt:
            console.print("\n[dim]Operation cancelled by user.[/dim]")
            raise typer.Exit(130) from None

    return wrapper


# Shared console instance for consistent output
console = CLIConsole()

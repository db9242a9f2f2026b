"""CLI context and dependency container."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import click
import typer
from dotenv import load_dotenv

from rops.cli.deployment.shell_commands import ShellCommands
from rops.cli.shared.console import CLIConsole, console
from rops.config.settings import Settings, load_settings

DOTENV_FILE = Path(".env")


@dataclass(frozen=True)
class CLIContext:
    """Runtime dependencies for CLI commands."""

    console: CLIConsole
    settings: Settings
    commands: ShellCommands


def build_cli_context(config_path: Path | None = None) -> CLIContext:
    """Build a fresh CLIContext.

    Loads ``.env`` (without overriding the real environment) and reads the
    settings once; everything downstream receives them explicitly.
    """
    load_dotenv(DOTENV_FILE, override=False)
    return CLIContext(
        console=console,
        settings=load_settings(config_path),
        commands=ShellCommands(),
    )


def get_cli_context(ctx: typer.Context | None = None) -> CLIContext:
    """Return the CLIContext from Typer, falling back to a new instance.

    The root callback may store ``{"config_path": ...}`` as the context
    object to point at another settings file.
    """
    context = ctx or click.get_current_context(silent=True)
    if context and isinstance(context.obj, CLIContext):
        return context.obj
    config_path = None
    if context and isinstance(context.obj, dict):
        config_path = context.obj.get("config_path")
    return build_cli_context(config_path)

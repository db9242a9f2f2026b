"""Main CLI application module.

This module provides the main entry point for the rops CLI.

Command Groups:
- charts: Helm chart deployment and Metablock block sync
- extra: Other helpers
"""

from pathlib import Path
from typing import Annotated

import typer

from rops.logging_config import configure_logging

from .commands import charts_app, extra_app, show_settings

# Create the main CLI application
app = typer.Typer(
    help="🚀 rops - Helm chart deployment tool",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def _configure(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            envvar="ROPS_CONFIG",
            help="Settings file (default: rops.toml)",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option("--log-level", envvar="ROPS_LOG_LEVEL", help="Log level"),
    ] = "INFO",
) -> None:
    configure_logging(log_level)
    ctx.obj = {"config_path": config}


app.command("settings")(show_settings)
app.add_typer(charts_app, name="charts")
app.add_typer(extra_app, name="extra")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

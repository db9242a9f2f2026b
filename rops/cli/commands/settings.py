"""Settings display command."""

from typing import Any

import typer

from rops.cli.context import get_cli_context
from rops.cli.shared.console import with_error_handling
from rops.config.settings import Settings
from rops.utils.secrets import mask


def settings_as_json(settings: Settings) -> dict[str, Any]:
    """Settings as a JSON-ready dict with the API token masked."""
    data = settings.model_dump(mode="json")
    token = settings.metablock_api_token
    data["metablock_api_token"] = mask(token.get_secret_value()) if token else None
    return data


@with_error_handling
def show_settings(ctx: typer.Context) -> None:
    """Show the resolved settings."""
    cli = get_cli_context(ctx)
    cli.console.print_json(settings_as_json(cli.settings))

"""Additional utility commands."""

from typing import Annotated

import typer

from rops.cli.shared.console import console
from rops.utils.secrets import random_base64

extra_app = typer.Typer(name="extra", help="Other additional commands.", no_args_is_help=True)


@extra_app.command("cookie-secret")
def cookie_secret(
    length: Annotated[
        int,
        typer.Option("--length", "-l", min=1, help="Number of random bytes"),
    ] = 32,
) -> None:
    """Generate a strong cookie secret for oauth2-proxy."""
    console.print(f"Generated cookie secret: {random_base64(length)}")

"""Helm chart commands.

This module provides commands for listing the chart catalog, updating the
helm plugins rops relies on, and deploying charts.
"""

from typing import Annotated

import typer

from rops.cli.context import get_cli_context
from rops.cli.deployment.chart_deployer import (
    ChartDeployer,
    DeployRequest,
    load_chart_catalog,
)
from rops.cli.shared.console import with_error_handling

charts_app = typer.Typer(
    name="charts",
    help="Deploy Helm charts to Kubernetes.",
    no_args_is_help=True,
)


@charts_app.command("list")
@charts_app.command("ls", hidden=True)
@with_error_handling
def list_charts(ctx: typer.Context) -> None:
    """List all available charts as JSON."""
    cli = get_cli_context(ctx)
    catalog = load_chart_catalog(cli.settings.charts.config)
    cli.console.print_json(catalog.to_jsonable())


@charts_app.command()
@with_error_handling
def update(ctx: typer.Context) -> None:
    """Install or update the helm-secrets plugin."""
    cli = get_cli_context(ctx)
    cli.commands.helm.install_secrets_plugin()
    cli.console.ok("helm-secrets plugin is up to date")


@charts_app.command()
@with_error_handling
def deploy(
    ctx: typer.Context,
    chart: Annotated[str, typer.Argument(help="The name of the chart")],
    extra: Annotated[
        list[str] | None,
        typer.Argument(
            help="Extra helm arguments, after `--` (e.g. -- --timeout 10m)",
            show_default=False,
        ),
    ] = None,
    env: Annotated[
        str | None,
        typer.Option("--env", "-e", help="K8s environment to deploy to (default: prod)"),
    ] = None,
    namespace: Annotated[
        str | None,
        typer.Option("--namespace", "-n", help="The namespace to deploy the chart in"),
    ] = None,
    vars: Annotated[
        str | None,
        typer.Option("--vars", "-v", help="Override the variables path"),
    ] = None,
    args: Annotated[
        list[str] | None,
        typer.Option("--args", "-a", help="Additional helm argument (repeatable)"),
    ] = None,
    set_values: Annotated[
        list[str] | None,
        typer.Option("--set", "-s", help="key=value passed to helm --set (repeatable)"),
    ] = None,
    block: Annotated[
        bool,
        typer.Option("--block", "-b", help="Deploy the Metablock block only"),
    ] = False,
    wait: Annotated[
        bool,
        typer.Option("--wait", help="Wait for the deployment to finish"),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Print commands without running them"),
    ] = False,
) -> None:
    """Deploy a chart and sync its Metablock block.

    Examples:
        # Deploy to the default (prod) environment
        rops charts deploy api

        # Deploy to dev in a custom namespace, waiting for the rollout
        rops charts deploy api -e dev -n sandbox --wait

        # Only update the gateway block
        rops charts deploy api --block
    """
    cli = get_cli_context(ctx)
    catalog = load_chart_catalog(cli.settings.charts.config)
    request = DeployRequest(
        chart=chart,
        env=env,
        namespace=namespace,
        vars=vars,
        args=(*(args or []), *(extra or [])),
        set_values=tuple(set_values or []),
        block_only=block,
        wait=wait,
        dry_run=dry_run,
    )
    ChartDeployer(cli.settings, cli.commands, cli.console).deploy(request, catalog)

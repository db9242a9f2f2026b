"""Chart deployer.

This module provides the ChartDeployer class which pushes a chart from the
catalog into a Kubernetes cluster with Helm and keeps its Metablock block
in sync.

The deployment workflow consists of:
1. Clone git repositories the chart depends on (always a fresh clone)
2. Register the Helm repositories the chart depends on
3. Compose the ``helm upgrade --install`` command
4. Refresh the kubeconfig of the target EKS cluster
5. Run the upgrade
6. Create or update the chart's Metablock block, if it has one

With ``block_only`` only the last step runs. Any failure aborts the
remaining steps; nothing already done is rolled back.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from loguru import logger

from rops.errors import ConfigError, ExternalToolError
from rops.infra.metablock import Block, MetablockClient

from ..shell_commands import CommandInvocation, ShellCommands
from .models import DEFAULT_ENV, ChartCatalog, DeployRequest, ResolvedDeploy

if TYPE_CHECKING:
    from rops.cli.shared.console import CLIConsole
    from rops.config.settings import Settings

VALUES_FILE = "values.yaml"
SECRETS_FILE = "secrets.yaml"


class ChartDeployer:
    """Deploys catalog charts with Helm.

    Attributes:
        settings: Resolved rops settings
        commands: Shell command executor
        console: Console for progress output
    """

    def __init__(
        self,
        settings: Settings,
        commands: ShellCommands,
        console: CLIConsole,
        metablock_factory: Callable[[], MetablockClient] | None = None,
    ) -> None:
        """Initialize the chart deployer.

        Args:
            settings: Resolved rops settings
            commands: Shell command executor
            console: Console for progress output
            metablock_factory: Builds the Metablock client when a block has
                to be synced. Defaults to a client built from settings.
        """
        self.settings = settings
        self.commands = commands
        self.console = console
        self._metablock_factory = metablock_factory or (
            lambda: MetablockClient.from_settings(settings)
        )

    # =========================================================================
    # Resolution
    # =========================================================================

    def resolve(self, request: DeployRequest, catalog: ChartCatalog) -> ResolvedDeploy:
        """Resolve chart, namespace, cluster and values path for a request.

        Namespace precedence: request, then chart, then the global default.

        Raises:
            ChartNotFoundError: If the chart is not in the catalog
            ConfigError: If the environment has no cluster configured
        """
        chart = catalog.get(request.chart)
        charts_settings = self.settings.charts

        namespace = (
            request.namespace or chart.namespace or charts_settings.default_namespace
        )
        env = request.env or DEFAULT_ENV
        cluster = charts_settings.envs.get(env)
        if cluster is None:
            available = ", ".join(charts_settings.envs)
            raise ConfigError(
                f"Environment '{env}' not found in charts settings - available are {available}"
            )

        return ResolvedDeploy(
            name=request.chart,
            chart=chart,
            env=env,
            cluster=cluster,
            namespace=namespace,
            vars_path=charts_settings.vars_path(env, request.vars),
        )

    def build_upgrade_command(
        self, plan: ResolvedDeploy, request: DeployRequest
    ) -> CommandInvocation:
        """Compose the helm upgrade command for a resolved deploy.

        When a values path is set, helm-secrets decrypts
        ``values.yaml``/``secrets.yaml`` from it, followed by the same pair
        from the chart's own subdirectory when present, so chart values
        override environment values.
        """
        value_files: list[str] = []
        if plan.vars_path is not None:
            layers = [plan.vars_path]
            chart_vars = plan.vars_path / plan.name
            if chart_vars.is_dir():
                layers.append(chart_vars)
            for layer in layers:
                value_files.extend([str(layer / VALUES_FILE), str(layer / SECRETS_FILE)])

        return self.commands.helm.upgrade_install_command(
            plan.release_name,
            plan.chart.chart,
            plan.namespace,
            value_files=value_files,
            set_values=request.set_values,
            extra_args=request.args,
            decrypt_secrets=plan.vars_path is not None,
            wait=request.wait,
        )

    # =========================================================================
    # Public Interface
    # =========================================================================

    def deploy(self, request: DeployRequest, catalog: ChartCatalog) -> Block | None:
        """Deploy a chart and sync its block.

        Args:
            request: What to deploy and where
            catalog: Chart catalog

        Returns:
            The synced Metablock block, or None if the chart has none

        Raises:
            DeploymentError: On the first failing step
        """
        chart = catalog.get(request.chart)

        if not request.block_only:
            plan = self.resolve(request, catalog)
            self._deploy_release(plan, request)

        if chart.block is None:
            return None

        self.console.info(f"Syncing Metablock block '{chart.block.name}'")
        with self._metablock_factory() as metablock:
            block = metablock.apply(chart.block, self.settings.blocks.default_space)
        self.console.ok(f"Block {block.full_name} is up to date")
        return block

    # =========================================================================
    # Private Helpers
    # =========================================================================

    def _deploy_release(self, plan: ResolvedDeploy, request: DeployRequest) -> None:
        for name, url in plan.chart.git_repos.items():
            self.console.info(f"Cloning {url} into {name}")
            self.commands.git.clone(name, url)

        for name, url in plan.chart.helm_repos.items():
            self.commands.helm.repo_add(name, url)

        command = self.build_upgrade_command(plan, request)

        self.console.info(
            f"Deploying [bold]{plan.release_name}[/bold] to namespace "
            f"{plan.namespace} on cluster {plan.cluster} ({plan.env})"
        )
        self.commands.aws.update_kubeconfig(plan.cluster, dry_run=request.dry_run)

        outcome = self.commands.helm.upgrade_install(command, dry_run=request.dry_run)
        if not outcome.success:
            raise ExternalToolError(
                f"Failed to deploy chart '{plan.release_name}'",
                details=f"helm exited with status {outcome.returncode} and "
                f"{outcome.error_lines} error lines",
            )
        if outcome.skipped:
            logger.info(f"Dry run of {plan.release_name} complete")
        else:
            self.console.ok(f"Chart {plan.release_name} deployed")

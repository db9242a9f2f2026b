"""Helm command abstractions.

This module provides the Helm operations used by the chart pipeline:
repository registration, plugin management and the upgrade command
itself.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from rops.errors import ExternalToolError

from .types import CommandInvocation, ExecutionOutcome

if TYPE_CHECKING:
    from .runner import CommandRunner

HELM_SECRETS_PLUGIN = "secrets"
HELM_SECRETS_REPO = "https://github.com/jkroepke/helm-secrets"
DECRYPT_ENV = "DECRYPT_CHARTS"


class HelmCommands:
    """Helm-related shell commands.

    Provides operations for:
    - Repository registration (repo add)
    - Plugin installation and update
    - Building the ``upgrade --install`` invocation
    """

    def __init__(self, runner: CommandRunner) -> None:
        """Initialize Helm commands.

        Args:
            runner: Command runner for executing shell commands
        """
        self._runner = runner

    # =========================================================================
    # Repositories and Plugins
    # =========================================================================

    def repo_add(self, name: str, url: str) -> None:
        """Register a Helm chart repository.

        Registering an already known repository is left to helm itself.

        Raises:
            ExternalToolError: If helm reports failure
        """
        outcome = self._runner.execute(
            CommandInvocation.of("helm", "repo", "add", name, url)
        )
        if not outcome.success:
            raise ExternalToolError(f"Failed to add Helm repo '{name}'")

    def plugin(self, action: str, target: str) -> ExecutionOutcome:
        """Run ``helm plugin <action> <target>``."""
        return self._runner.execute(
            CommandInvocation.of("helm", "plugin", action, target)
        )

    def install_secrets_plugin(self) -> None:
        """Install the helm-secrets plugin, updating it when already present.

        Raises:
            ExternalToolError: If both install and update fail
        """
        if self.plugin("install", HELM_SECRETS_REPO).success:
            return
        if not self.plugin("update", HELM_SECRETS_PLUGIN).success:
            raise ExternalToolError(
                f"Failed to update Helm plugin '{HELM_SECRETS_PLUGIN}'"
            )

    # =========================================================================
    # Release Management
    # =========================================================================

    @staticmethod
    def upgrade_install_command(
        release_name: str,
        chart_ref: str,
        namespace: str,
        *,
        value_files: Sequence[str] = (),
        set_values: Sequence[str] = (),
        extra_args: Sequence[str] = (),
        decrypt_secrets: bool = False,
        wait: bool = False,
    ) -> CommandInvocation:
        """Build a ``helm upgrade --install`` invocation.

        Value files are passed in order, so later files override earlier
        ones. When ``decrypt_secrets`` is set the command goes through the
        helm-secrets plugin.

        Example:
            >>> HelmCommands.upgrade_install_command(
            ...     "api-services", "charts/api", "services",
            ...     value_files=["/vars/prod/values.yaml"],
            ... )
        """
        args: list[str] = []
        env: dict[str, str] = {}
        if decrypt_secrets:
            env[DECRYPT_ENV] = "true"
            args.append(HELM_SECRETS_PLUGIN)

        args.extend(
            ["upgrade", release_name, chart_ref, "--install", "--namespace", namespace]
        )
        for value_file in value_files:
            args.extend(["-f", value_file])
        for value in set_values:
            args.extend(["--set", value])
        args.extend(extra_args)
        if wait:
            args.append("--wait")

        return CommandInvocation.of("helm", *args, env=env)

    def upgrade_install(
        self, invocation: CommandInvocation, *, dry_run: bool = False
    ) -> ExecutionOutcome:
        """Run a command built by :meth:`upgrade_install_command`."""
        return self._runner.execute(invocation, dry_run=dry_run)

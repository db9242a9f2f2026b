"""AWS CLI command abstractions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rops.errors import ExternalToolError

from .types import CommandInvocation

if TYPE_CHECKING:
    from .runner import CommandRunner


class AwsCommands:
    """AWS CLI commands needed to reach EKS clusters."""

    def __init__(self, runner: CommandRunner) -> None:
        self._runner = runner

    def update_kubeconfig(self, cluster: str, *, dry_run: bool = False) -> None:
        """Refresh kubeconfig credentials for an EKS cluster.

        Args:
            cluster: EKS cluster name
            dry_run: Only log the command

        Raises:
            ExternalToolError: If the aws CLI reports failure
        """
        outcome = self._runner.execute(
            CommandInvocation.of("aws", "eks", "update-kubeconfig", "--name", cluster),
            dry_run=dry_run,
        )
        if not outcome.success:
            raise ExternalToolError(
                f"Failed to update kubeconfig for cluster '{cluster}'"
            )

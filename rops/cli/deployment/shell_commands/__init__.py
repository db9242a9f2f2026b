"""Shell command abstractions for chart deployment.

This package wraps the external tools the deployment pipeline drives.
It is organized into specialized modules for each tool:

- helm: repository registration, plugins, upgrade --install
- git: clean clones of chart dependencies
- aws: EKS kubeconfig refresh

All of them execute through a single CommandRunner which streams output
to the log and classifies success.

Usage:
    from rops.cli.deployment.shell_commands import ShellCommands

    commands = ShellCommands()
    commands.helm.repo_add("bitnami", "https://charts.bitnami.com/bitnami")
"""

from pathlib import Path

from .aws import AwsCommands
from .git import GitCommands
from .helm import HelmCommands
from .runner import CommandRunner
from .types import CommandInvocation, ExecutionOutcome


class ShellCommands:
    """Unified interface for all shell command operations.

    Attributes:
        runner: The shared command runner
        helm: Helm-related commands
        git: Git repository commands
        aws: AWS CLI commands
    """

    def __init__(
        self, cwd: Path | None = None, *, runner: CommandRunner | None = None
    ) -> None:
        """Initialize the shell commands executor.

        Args:
            cwd: Working directory for commands. None means the current
                 process directory, which is where git clones land.
            runner: Pre-built runner, mostly for tests
        """
        self.runner = runner or CommandRunner(cwd)

        self.helm = HelmCommands(self.runner)
        self.git = GitCommands(self.runner)
        self.aws = AwsCommands(self.runner)


__all__ = [
    "ShellCommands",
    "CommandInvocation",
    "ExecutionOutcome",
    "CommandRunner",
    "HelmCommands",
    "GitCommands",
    "AwsCommands",
]

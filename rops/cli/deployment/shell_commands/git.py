"""Git command abstractions.

Charts may depend on git repositories that must be present next to the
chart catalog; they are always cloned fresh.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from rops.errors import ExternalToolError
from rops.utils.paths import rimraf

from .types import CommandInvocation

if TYPE_CHECKING:
    from .runner import CommandRunner


class GitCommands:
    """Git-related shell commands."""

    def __init__(self, runner: CommandRunner) -> None:
        """Initialize Git commands.

        Args:
            runner: Command runner for executing shell commands
        """
        self._runner = runner

    def clone(self, name: str, url: str) -> None:
        """Clone ``url`` into the directory ``name``.

        Any existing directory with that name is removed first, so the
        result is always a clean clone and never a merge with local state.

        Raises:
            FilesystemError: If the existing directory cannot be removed
            ExternalToolError: If git reports failure
        """
        target = self._runner.cwd / name if self._runner.cwd else Path(name)
        if rimraf(target):
            logger.debug(f"Removed existing directory '{target}'")
        outcome = self._runner.execute(CommandInvocation.of("git", "clone", url, name))
        if not outcome.success:
            raise ExternalToolError(f"Failed to clone Git repo '{url}' into '{name}'")

"""Data types for shell command execution.

This module contains the dataclasses exchanged between the command
modules (helm, git, aws) and the CommandRunner.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

__all__ = [
    "CommandInvocation",
    "ExecutionOutcome",
]


@dataclass(frozen=True)
class CommandInvocation:
    """A single external command ready to be executed.

    Attributes:
        program: Executable name or path (e.g. "helm")
        args: Ordered command line arguments
        env: Ordered environment overrides merged over the parent environment
        cwd: Working directory, or None for the current process directory
    """

    program: str
    args: tuple[str, ...] = ()
    env: tuple[tuple[str, str], ...] = ()
    cwd: Path | None = field(default=None, compare=False)

    @classmethod
    def of(
        cls,
        program: str,
        *args: str,
        env: Mapping[str, str] | None = None,
        cwd: Path | None = None,
    ) -> CommandInvocation:
        """Build an invocation from positional arguments.

        Example:
            >>> CommandInvocation.of("git", "clone", url, "charts")
        """
        return cls(
            program=program,
            args=tuple(args),
            env=tuple((env or {}).items()),
            cwd=cwd,
        )

    @property
    def argv(self) -> list[str]:
        """Program followed by its arguments, as passed to the OS."""
        return [self.program, *self.args]

    def render(self) -> str:
        """Human readable form: ``K=V ... program arg ...``."""
        command = " ".join(self.argv)
        if not self.env:
            return command
        envs = " ".join(f"{key}={value}" for key, value in self.env)
        return f"{envs} {command}"


@dataclass(frozen=True)
class ExecutionOutcome:
    """Verdict of a CommandRunner execution.

    Attributes:
        success: Whether the command is considered successful
        returncode: Process exit status, None when skipped by dry-run
        error_lines: Number of stderr lines counted as errors
    """

    success: bool
    returncode: int | None = None
    error_lines: int = 0

    @property
    def skipped(self) -> bool:
        """True when the command was never spawned (dry-run)."""
        return self.returncode is None

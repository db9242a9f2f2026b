"""Command runner for executing external tools.

This module provides the streaming command execution used by all
specialized command modules (helm, git, aws). Output is never captured
into memory: stdout and stderr are drained line by line into the log
while the child process runs.
"""

from __future__ import annotations

import os
import subprocess
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import IO, cast

from loguru import logger

from rops.errors import CommandSpawnError, OutputDrainError

from .types import CommandInvocation, ExecutionOutcome


class CommandRunner:
    """Low-level command executor with consistent outcome handling.

    The success verdict of an execution is lenient: a command is
    successful when it exits with status 0 *or* when it wrote no error
    lines to stderr. Lines containing the ``ignore_error`` substring are
    logged at debug level and never counted as errors.

    Note that a command failing without writing anything to stderr is
    therefore reported as successful.
    """

    def __init__(self, cwd: Path | None = None) -> None:
        """Initialize the command runner.

        Args:
            cwd: Default working directory for commands that do not set
                 their own. None means the current process directory.
        """
        self.cwd = cwd

    def execute(
        self,
        invocation: CommandInvocation,
        *,
        dry_run: bool = False,
        ignore_error: str | None = None,
    ) -> ExecutionOutcome:
        """Execute a command, streaming its output to the log.

        Args:
            invocation: Command to run
            dry_run: Log the command and return success without spawning
            ignore_error: stderr lines containing this text are not errors

        Returns:
            ExecutionOutcome with the verdict, exit status and error count

        Raises:
            CommandSpawnError: If the process could not be started
            OutputDrainError: If a reader thread failed unexpectedly
        """
        logger.info(invocation.render())
        if dry_run:
            logger.info("Dry run mode enabled, skipping actual command execution.")
            return ExecutionOutcome(success=True)

        env = os.environ.copy()
        env.update(dict(invocation.env))

        try:
            process = subprocess.Popen(
                invocation.argv,
                cwd=invocation.cwd or self.cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,  # Kept apart from stdout to count errors
                text=True,
                encoding="utf-8",
                errors="replace",
                env=env,
            )
        except OSError as exc:
            raise CommandSpawnError(invocation.program, str(exc)) from exc

        with process, ThreadPoolExecutor(max_workers=2) as pool:
            # Both pipes are set since PIPE was requested above
            stdout = cast(IO[str], process.stdout)
            stderr = cast(IO[str], process.stderr)
            stdout_task = pool.submit(_drain_stdout, stdout)
            stderr_task = pool.submit(_drain_stderr, stderr, ignore_error)
            returncode = process.wait()
            _join(stdout_task, "stdout")
            error_lines = _join(stderr_task, "stderr")

        return ExecutionOutcome(
            success=returncode == 0 or error_lines == 0,
            returncode=returncode,
            error_lines=error_lines,
        )


def _drain_stdout(stream: IO[str]) -> int:
    """Log every stdout line at info level."""
    count = 0
    for line in stream:
        logger.info(line.rstrip("\r\n"))
        count += 1
    return count


def _drain_stderr(stream: IO[str], ignore_error: str | None) -> int:
    """Log stderr lines and count the ones that are not ignored."""
    error_lines = 0
    for raw in stream:
        line = raw.rstrip("\r\n")
        if ignore_error and ignore_error in line:
            logger.debug(f"skipping error: {line}")
            continue
        logger.warning(line)
        error_lines += 1
    return error_lines


def _join(task: Future[int], name: str) -> int:
    try:
        return task.result()
    except Exception as exc:
        raise OutputDrainError(f"Failed to join {name} reader: {exc}") from exc

"""Error taxonomy shared by the deployment pipeline and its collaborators.

Every error raised on purpose by rops derives from DeploymentError so the
CLI can report it with a single line (plus optional details) and a nonzero
exit status.
"""

from __future__ import annotations


class DeploymentError(Exception):
    """Raised when a deployment operation fails."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ConfigError(DeploymentError):
    """Missing or invalid configuration."""


class ChartNotFoundError(DeploymentError):
    """The requested chart is not in the catalog."""

    def __init__(self, chart: str, available: list[str] | None = None):
        details = None
        if available:
            details = "Available charts: " + ", ".join(available)
        super().__init__(f"Chart '{chart}' not found", details=details)
        self.chart = chart


class ExternalToolError(DeploymentError):
    """An external command (helm, git, aws) reported failure."""


class CommandSpawnError(ExternalToolError):
    """The external command could not be started at all."""

    def __init__(self, program: str, reason: str):
        super().__init__(
            f"Failed to run '{program}': {reason}",
            details=f"Make sure '{program}' is installed and on your PATH.",
        )
        self.program = program


class OutputDrainError(ExternalToolError):
    """A stdout/stderr reader thread died while draining command output.

    This signals a defect in rops itself rather than a failing command.
    """


class FilesystemError(DeploymentError):
    """A local filesystem operation failed."""

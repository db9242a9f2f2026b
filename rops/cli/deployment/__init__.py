"""Deployment module for pushing catalog charts into Kubernetes.

The package is organized into subpackages:
- shell_commands: Abstractions over helm, git and aws execution
- chart_deployer: The chart deployment pipeline
"""

from rops.errors import DeploymentError

from .chart_deployer import ChartDeployer

__all__ = ["ChartDeployer", "DeploymentError"]

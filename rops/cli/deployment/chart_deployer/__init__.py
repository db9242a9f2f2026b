"""Chart deployer package.

- models: chart catalog, deploy request and resolved plan
- deployer: the ChartDeployer pipeline (clone, repo add, kubeconfig,
  helm upgrade, Metablock sync)

Usage:
    from rops.cli.deployment.chart_deployer import ChartDeployer, DeployRequest

    deployer = ChartDeployer(settings, ShellCommands(), console)
    deployer.deploy(DeployRequest(chart="api", env="dev"), catalog)
"""

from .deployer import ChartDeployer
from .models import (
    Chart,
    ChartCatalog,
    DeployRequest,
    ResolvedDeploy,
    load_chart_catalog,
)

__all__ = [
    "ChartDeployer",
    "Chart",
    "ChartCatalog",
    "DeployRequest",
    "ResolvedDeploy",
    "load_chart_catalog",
]

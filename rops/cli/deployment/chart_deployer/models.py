"""Chart catalog and deploy request models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, RootModel, ValidationError

from rops.errors import ChartNotFoundError, ConfigError
from rops.infra.metablock.models import BlockConfig

DEFAULT_ENV = "prod"


class Chart(BaseModel):
    """A deployable chart as declared in the chart catalog."""

    model_config = ConfigDict(populate_by_name=True)

    chart: str = Field(description="Chart reference passed to helm (repo/name or path)")
    alias: str | None = None
    namespace: str | None = None
    description: str | None = None
    helm_repos: dict[str, str] = Field(default_factory=dict, alias="helm-repos")
    git_repos: dict[str, str] = Field(default_factory=dict, alias="git-repos")
    block: BlockConfig | None = None
    append_namespace: bool = Field(default=True, alias="append-namespace")


class ChartCatalog(RootModel[dict[str, Chart]]):
    """Mapping of chart name to chart definition."""

    def get(self, name: str) -> Chart:
        """Return the chart called ``name``.

        Raises:
            ChartNotFoundError: If the catalog has no such chart
        """
        try:
            return self.root[name]
        except KeyError:
            raise ChartNotFoundError(name, sorted(self.root)) from None

    def names(self) -> list[str]:
        return list(self.root)

    def to_jsonable(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def load_chart_catalog(path: str | Path) -> ChartCatalog:
    """Load the chart catalog YAML file.

    Raises:
        ConfigError: If the file is missing or not a valid catalog
    """
    catalog_path = Path(path)
    try:
        content = catalog_path.read_text()
    except OSError as exc:
        raise ConfigError(
            f"Failed to read chart catalog '{catalog_path}': {exc}",
            details="Set charts.config in rops.toml or the CHARTS_CONFIG variable.",
        ) from exc

    try:
        loaded = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing chart catalog '{catalog_path}': {e}") from e

    try:
        catalog = ChartCatalog.model_validate(loaded)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid chart catalog '{catalog_path}'", details=str(e)
        ) from e
    logger.debug(f"Loaded {len(catalog.root)} charts from {catalog_path}")
    return catalog


@dataclass(frozen=True)
class DeployRequest:
    """A request to deploy one chart.

    Attributes:
        chart: Chart name in the catalog
        env: Target environment, defaults to "prod"
        namespace: Explicit namespace, overrides the chart and global defaults
        vars: Override for the values/secrets root directory
        args: Extra arguments appended verbatim to helm upgrade
        set_values: key=value overrides passed with --set
        block_only: Only sync the Metablock block
        wait: Pass --wait to helm
        dry_run: Log the commands without running them
    """

    chart: str
    env: str | None = None
    namespace: str | None = None
    vars: str | None = None
    args: tuple[str, ...] = field(default_factory=tuple)
    set_values: tuple[str, ...] = field(default_factory=tuple)
    block_only: bool = False
    wait: bool = False
    dry_run: bool = False


@dataclass(frozen=True)
class ResolvedDeploy:
    """A deploy request resolved against settings and the catalog."""

    name: str
    chart: Chart
    env: str
    cluster: str
    namespace: str
    vars_path: Path | None

    @property
    def release_name(self) -> str:
        """Helm release name: alias or chart name, optionally namespaced."""
        base = self.chart.alias or self.name
        if self.chart.append_namespace:
            return f"{base}-{self.namespace}"
        return base

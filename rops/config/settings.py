"""rops settings.

Settings are read once at startup from ``rops.toml`` and the process
environment, then passed explicitly to every component. Nothing below the
CLI layer reads environment variables.

Environment variables:
    ROPS_CONFIG: settings file path (default: rops.toml)
    CHARTS_CONFIG: chart catalog path (default: devops/charts/charts.yaml)
    CHARTS_DEFAULT_NAMESPACE: fallback namespace (default: services)
    METABLOCK_API_URL: Metablock API root (default: https://api.metablock.io)
    METABLOCK_SPACE: default Metablock space (default: metablock)
    METABLOCK_API_TOKEN: Metablock API key (required to sync blocks)
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel, Field, SecretStr, ValidationError

from rops.errors import ConfigError
from rops.utils.paths import canonical

DEFAULT_CONFIG_FILE = "rops.toml"
DEFAULT_CHARTS_CONFIG = "devops/charts/charts.yaml"
DEFAULT_NAMESPACE = "services"
DEFAULT_METABLOCK_API_URL = "https://api.metablock.io"
DEFAULT_METABLOCK_SPACE = "metablock"


class ChartsSettings(BaseModel):
    """Chart deployment settings (``[charts]`` table)."""

    envs: dict[str, str] = Field(
        default_factory=dict, description="Mapping of environment to cluster name"
    )
    config: str = Field(
        default=DEFAULT_CHARTS_CONFIG,
        description="Location of the chart catalog YAML file",
    )
    vars: str | None = Field(
        default=None, description="Optional root of per-environment values and secrets"
    )
    default_namespace: str = DEFAULT_NAMESPACE

    def vars_path(self, env: str, override: str | None = None) -> Path | None:
        """Return the values directory for ``env``, if any.

        The override wins over the configured root. The root is made
        canonical when it exists on disk.
        """
        root = override or self.vars
        if root is None:
            return None
        return canonical(root) / env


class BlockSettings(BaseModel):
    """Metablock settings (``[blocks]`` table)."""

    api_url: str = DEFAULT_METABLOCK_API_URL
    default_space: str = DEFAULT_METABLOCK_SPACE


class Settings(BaseModel):
    """Top level settings."""

    charts: ChartsSettings = Field(default_factory=ChartsSettings)
    blocks: BlockSettings = Field(default_factory=BlockSettings)
    metablock_api_token: SecretStr | None = Field(default=None, exclude=True)


def load_settings(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load settings from a TOML file with environment defaults.

    Args:
        path: Settings file, defaults to $ROPS_CONFIG or rops.toml
        environ: Environment mapping, defaults to os.environ

    Returns:
        Validated Settings. A missing file yields the defaults.

    Raises:
        ConfigError: If the file cannot be read or is invalid
    """
    env = os.environ if environ is None else environ
    config_path = Path(path or env.get("ROPS_CONFIG", DEFAULT_CONFIG_FILE))

    data: dict[str, Any] = {}
    if config_path.exists():
        try:
            data = tomllib.loads(config_path.read_text())
        except OSError as exc:
            raise ConfigError(f"Failed to read configuration file: {exc}") from exc
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Failed to parse configuration: {exc}") from exc
        logger.debug(f"Loaded settings from {config_path}")
    else:
        logger.warning(f"Configuration file not found: {config_path}")

    charts = dict(data.get("charts") or {})
    charts.setdefault("config", env.get("CHARTS_CONFIG", DEFAULT_CHARTS_CONFIG))
    charts.setdefault(
        "default_namespace", env.get("CHARTS_DEFAULT_NAMESPACE", DEFAULT_NAMESPACE)
    )

    blocks = dict(data.get("blocks") or {})
    blocks.setdefault("api_url", env.get("METABLOCK_API_URL", DEFAULT_METABLOCK_API_URL))
    blocks.setdefault(
        "default_space", env.get("METABLOCK_SPACE", DEFAULT_METABLOCK_SPACE)
    )

    try:
        return Settings(
            charts=ChartsSettings(**charts),
            blocks=BlockSettings(**blocks),
            metablock_api_token=env.get("METABLOCK_API_TOKEN") or None,
        )
    except ValidationError as e:
        raise ConfigError("Invalid configuration", details=str(e)) from e

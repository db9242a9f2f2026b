"""Metablock block models.

BlockConfig is the desired state declared in the chart catalog; Block is
the canonical record returned by the Metablock API.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, JsonValue


class Plugin(BaseModel):
    """A gateway plugin attached to a route.

    The plugin configuration is an arbitrary JSON document whose shape
    depends on the plugin.
    """

    name: str
    config: JsonValue = None


class Route(BaseModel):
    """A route exposed by a block."""

    name: str
    protocols: list[str]
    paths: list[str]
    plugins: list[Plugin] = Field(default_factory=list)
    preserve_host: bool = True
    strip_path: bool = False


class BlockConfig(BaseModel):
    """Desired state of a block, unique by name within a space."""

    name: str
    space: str | None = Field(
        default=None,
        description="Target space, falls back to the configured default space",
    )
    upstream: str
    routes: list[Route]
    tags: list[str] | None = None
    root: bool = False
    html: bool = False
    used_cdn: bool = False


class Space(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    hosted: bool
    domain: str


class Block(BaseModel):
    """A block as stored by Metablock."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    space: Space
    full_name: str

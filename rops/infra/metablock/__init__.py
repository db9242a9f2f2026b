"""Metablock integration.

Keeps the gateway block attached to a chart in sync with the Metablock
registry.

Usage:
    from rops.infra.metablock import MetablockClient

    with MetablockClient.from_settings(settings) as client:
        client.apply(chart.block, settings.blocks.default_space)
"""

from .client import MetablockClient
from .errors import (
    MetablockApiError,
    MetablockDecodeError,
    MetablockError,
    MetablockTransportError,
)
from .models import Block, BlockConfig, Plugin, Route, Space

__all__ = [
    "MetablockClient",
    "MetablockError",
    "MetablockApiError",
    "MetablockDecodeError",
    "MetablockTransportError",
    "Block",
    "BlockConfig",
    "Plugin",
    "Route",
    "Space",
]

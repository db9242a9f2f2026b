"""Metablock API client.

Blocks are the gateway routing definitions Metablock serves in front of
the services deployed by rops. This client reconciles a desired block
definition with the remote registry: look it up by (space, name), then
update it in place or create it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

import httpx
from loguru import logger
from pydantic import SecretStr, TypeAdapter, ValidationError

from rops.errors import ConfigError

from .errors import (
    MetablockApiError,
    MetablockDecodeError,
    MetablockTransportError,
)
from .models import Block, BlockConfig

if TYPE_CHECKING:
    from rops.config.settings import Settings

USER_AGENT = "quantmind/rops"
API_KEY_HEADER = "x-metablock-api-key"

_Block = TypeAdapter(Block)
_BlockList = TypeAdapter(list[Block])

T = TypeVar("T")


class MetablockClient:
    """Metablock API client for block reconciliation.

    There is no optimistic locking: ``apply`` is a last-writer-wins full
    replace of the block definition.
    """

    def __init__(
        self,
        api_url: str,
        token: SecretStr | str,
        *,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        """
        Initialize the Metablock client.

        Args:
            api_url: Metablock API root (e.g. https://api.metablock.io)
            token: API key sent in the x-metablock-api-key header
            timeout: Request timeout in seconds
            client: Pre-built httpx client, mostly for tests
        """
        if isinstance(token, str):
            token = SecretStr(token)
        self.api_url = api_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout))
        self._headers = {
            "User-Agent": USER_AGENT,
            API_KEY_HEADER: token.get_secret_value(),
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> MetablockClient:
        """Build a client from settings, requiring the API token.

        Raises:
            ConfigError: If METABLOCK_API_TOKEN is not configured
        """
        if settings.metablock_api_token is None:
            raise ConfigError(
                "METABLOCK_API_TOKEN not set - add it to your env or the .env file"
            )
        return cls(settings.blocks.api_url, settings.metablock_api_token)

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> MetablockClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # =========================================================================
    # Reconciliation
    # =========================================================================

    def apply(self, config: BlockConfig, default_space: str) -> Block:
        """Create or update a block so that it matches ``config``.

        Args:
            config: Desired block definition
            default_space: Space used when the config does not name one

        Returns:
            The block record as stored by Metablock
        """
        space = config.space or default_space
        existing = self.get_block(space, config.name)
        if existing is not None:
            logger.info(
                f"Block '{config.name}' already exists in space '{space}'. Updating..."
            )
            block = self.update_block(existing.id, config)
            logger.info(f"Block '{block.full_name}' updated")
        else:
            logger.info(f"Creating new block '{config.name}' in space '{space}'")
            block = self.create_block(space, config)
            logger.info(f"Block '{block.full_name}' created")
        return block

    # =========================================================================
    # API calls
    # =========================================================================

    def get_block(self, space: str, name: str) -> Block | None:
        """Find a block by name in a space.

        When several blocks match, the first one returned by the API wins.
        """
        url = f"{self.api_url}/v1/spaces/{space}/blocks"
        logger.info(f"Fetching block information from {url}?name={name}")
        response = self._request("GET", url, params={"name": name})
        self._raise_for_client_error(response, "Failed to fetch block")
        blocks = self._decode(response, _BlockList)
        return blocks[0] if blocks else None

    def create_block(self, space: str, config: BlockConfig) -> Block:
        """Create a block in ``space``."""
        response = self._request(
            "POST", f"{self.api_url}/v1/spaces/{space}/blocks", json=_payload(config)
        )
        self._raise_for_client_error(response, "Failed to create block")
        return self._decode(response, _Block)

    def update_block(self, block_id: str, config: BlockConfig) -> Block:
        """Replace the definition of an existing block."""
        response = self._request(
            "PATCH", f"{self.api_url}/v1/blocks/{block_id}", json=_payload(config)
        )
        self._raise_for_client_error(response, "Failed to update block")
        return self._decode(response, _Block)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        try:
            return self._client.request(
                method, url, params=params, json=json, headers=self._headers
            )
        except httpx.RequestError as exc:
            logger.debug(f"Metablock request to {url} failed: {exc}")
            raise MetablockTransportError(
                f"Request failed: {method} {url}: {exc}"
            ) from exc

    @staticmethod
    def _raise_for_client_error(response: httpx.Response, message: str) -> None:
        if response.is_client_error:
            raise MetablockApiError(message, response.status_code, response.text)

    @staticmethod
    def _decode(response: httpx.Response, adapter: TypeAdapter[T]) -> T:
        try:
            return adapter.validate_json(response.content)
        except ValidationError as exc:
            raise MetablockDecodeError(
                f"Unexpected response from {response.request.url}",
                details=str(exc),
            ) from exc


def _payload(config: BlockConfig) -> dict[str, Any]:
    return config.model_dump(mode="json")


"""Metablock client errors."""

from __future__ import annotations

from rops.errors import DeploymentError


class MetablockError(DeploymentError):
    """Base exception for Metablock client errors."""


class MetablockTransportError(MetablockError):
    """The Metablock API could not be reached."""


class MetablockApiError(MetablockError):
    """The Metablock API rejected a request with a 4xx status."""

    def __init__(self, message: str, status_code: int, body: str):
        super().__init__(f"{message} - status {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class MetablockDecodeError(MetablockError):
    """A Metablock response could not be parsed into the expected shape."""

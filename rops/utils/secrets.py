"""Random secret helpers."""

import base64
import secrets


def random_base64(length: int = 32) -> str:
    """Return ``length`` random bytes encoded as URL-safe base64 without padding.

    Suitable as an oauth2-proxy cookie secret.
    """
    if length <= 0:
        raise ValueError("length must be positive")
    return base64.urlsafe_b64encode(secrets.token_bytes(length)).rstrip(b"=").decode()


def mask(value: str) -> str:
    """Mask a secret for display, keeping at most the first three characters."""
    if len(value) <= 3:
        return "***"
    return f"{value[:3]}***"

"""Token icon URL helpers."""

from __future__ import annotations

TOKEN_ICON_BASE_URL = "/tokens"


def get_token_icon_url(symbol: str | None) -> str:
    """Return the bundled icon path for a token symbol."""
    if not symbol:
        return f"{TOKEN_ICON_BASE_URL}/unknown.png"
    return f"{TOKEN_ICON_BASE_URL}/{symbol.lower()}.png"


def get_token_icon(symbol: str | None, logo_uri: str | None = None) -> str:
    """Return a token's icon, preferring its own logo URI.

    Absolute and relative logo URIs are both used as-is.
    """
    if not symbol:
        return f"{TOKEN_ICON_BASE_URL}/unknown.png"
    if logo_uri:
        return logo_uri
    return get_token_icon_url(symbol)

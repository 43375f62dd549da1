"""Small helpers shared by the API and CLI."""

from mmt.utils.token_icons import TOKEN_ICON_BASE_URL, get_token_icon, get_token_icon_url

__all__ = [
    "TOKEN_ICON_BASE_URL",
    "get_token_icon",
    "get_token_icon_url",
]

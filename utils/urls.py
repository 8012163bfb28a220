"""Redirect URL builders for hosted provider flows."""

from urllib.parse import urlencode

# Placeholder Stripe substitutes with the real session ID on redirect
CHECKOUT_SESSION_PLACEHOLDER = "{CHECKOUT_SESSION_ID}"


def build_url(base_url: str, path: str = "", **params: str | bool | None) -> str:
    """
    Join a base URL and path, appending non-empty query parameters.

    Braces are left unescaped so the checkout session placeholder survives.
    """
    url = base_url.rstrip("/") + "/" + path.lstrip("/")
    query = {
        key: str(value).lower() if isinstance(value, bool) else value
        for key, value in params.items()
        if value is not None and value != ""
    }
    if query:
        url = f"{url}?{urlencode(query, safe='{}')}"
    return url

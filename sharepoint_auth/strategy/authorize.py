"""Build the appredirect.aspx URL that starts the authorization-code flow."""

from __future__ import annotations

from urllib.parse import quote, urljoin, urlsplit

from .config import StrategyConfig
from .errors import ConfigurationError


def resolve_callback_url(callback_url: str | None, base_url: str | None) -> str | None:
    """Resolve a relative callback URL against the request's base URL."""
    if not callback_url:
        return None
    if urlsplit(callback_url).scheme or not base_url:
        return callback_url
    return urljoin(base_url, callback_url)


def build_authorization_url(
    config: StrategyConfig,
    callback_url: str | None = None,
    sp_site_url: str | None = None,
) -> str:
    """
    Return ``{site}/_layouts/15/appredirect.aspx?response_type=code&...``.

    Per-request ``callback_url`` and ``sp_site_url`` win over config.
    Raises ConfigurationError when no site URL is known.
    """
    site = sp_site_url or config.sp_site_url
    if not site:
        raise ConfigurationError("SharePoint strategy requires a site URL (spSiteUrl).")

    redirect_uri = callback_url or config.callback_url or ""
    query = "&".join(
        [
            "response_type=code",
            f"redirect_uri={quote(redirect_uri, safe='')}",
            f"client_id={quote(config.app_id, safe='')}",
        ]
    )
    return f"{site.rstrip('/')}{config.authorization_path}?{query}"

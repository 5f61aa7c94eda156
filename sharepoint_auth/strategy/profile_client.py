"""
Optional SharePoint REST client for the signed-in user's profile.

The context-token flow does not guarantee a profile, so this is only used
when ``skip_user_profile`` is False. Calls ``GET {site}/_api/web/currentuser``
with the freshly obtained access token.
"""

from __future__ import annotations

import logging
from dataclasses import replace

import requests

from .config import StrategyConfig
from .context import SharePointProfile
from .errors import ProviderError

logger = logging.getLogger(__name__)

CURRENT_USER_PATH = "/_api/web/currentuser"


def fetch_user_profile(
    access_token: str,
    profile: SharePointProfile,
    config: StrategyConfig,
) -> SharePointProfile:
    """
    Return ``profile`` enriched with login name, title and e-mail.

    Raises ProviderError("failed to fetch user profile") when the site is
    unknown, the request fails, or the response is not JSON.
    """
    if not profile.site_url:
        raise ProviderError("failed to fetch user profile")

    url = profile.site_url.rstrip("/") + CURRENT_USER_PATH
    headers = {
        "Authorization": f"Bearer {access_token}",
        "Accept": "application/json;odata=verbose",
    }
    try:
        resp = requests.get(url, headers=headers, timeout=config.http_timeout_seconds)
    except requests.RequestException as e:
        logger.warning("Profile request failed: %s", type(e).__name__)
        raise ProviderError("failed to fetch user profile") from e

    if resp.status_code != 200:
        logger.warning("Profile endpoint returned status=%s", resp.status_code)
        raise ProviderError("failed to fetch user profile", status_code=resp.status_code)

    try:
        body = resp.json()
    except ValueError as e:
        raise ProviderError("failed to fetch user profile", status_code=resp.status_code) from e

    # odata=verbose wraps the entity in {"d": {...}}
    entity = body.get("d", body) if isinstance(body, dict) else {}
    if not isinstance(entity, dict):
        entity = {}

    email = entity.get("Email")
    return replace(
        profile,
        username=entity.get("LoginName") or profile.username,
        display_name=entity.get("Title") or profile.display_name,
        emails=(str(email),) if email else profile.emails,
        raw=entity,
    )

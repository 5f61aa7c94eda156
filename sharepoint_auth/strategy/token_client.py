"""
Exchange a context token's refresh token for a SharePoint access token.

Background for newcomers:
    A context token is not an access token. It carries a ``refreshtoken``
    claim that the add-in trades at the ACS token endpoint (``grant_type=
    refresh_token``) for an access token scoped to the SharePoint host. The
    endpoint comes from ``SecurityTokenServiceUri`` inside the ``appctx``
    claim, and both ``client_id`` and ``resource`` are realm-qualified
    (``{id}@{realm}``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import requests

from .config import StrategyConfig
from .context import ContextToken
from .errors import ProviderError, SecurityError
from .principal import parse_principal

logger = logging.getLogger(__name__)

ACS_TOKEN_URL_TEMPLATE = "https://accounts.accesscontrol.windows.net/{realm}/tokens/OAuth/2"


@dataclass(frozen=True)
class ExchangeRequest:
    """Parameters derived from a verified context token. Used once."""

    realm: str
    client_id: str
    """Principal id of the issuer (first GUID of ``iss``)."""

    resource: str
    """Principal id of the audience (first GUID of ``aud``)."""

    host: str
    """Host segment of the audience, e.g. ``contoso.sharepoint.com``."""

    refresh_token: str
    token_url: str

    @property
    def resource_identifier(self) -> str:
        return f"{self.resource}/{self.host}@{self.realm}"


@dataclass(frozen=True)
class TokenResponse:
    access_token: str
    refresh_token: str | None = None
    token_type: str | None = None
    expires_in: int | None = None
    params: dict[str, Any] = field(default_factory=dict, compare=False)


def build_exchange_request(context_token: ContextToken, config: StrategyConfig) -> ExchangeRequest:
    """
    Derive exchange parameters from the ``aud``/``iss`` claims.

    Pure function of the token and config, so verifying the same token twice
    yields equal requests.
    """
    audience = parse_principal(context_token.audience, "aud", require_host=True)
    issuer = parse_principal(context_token.issuer, "iss")
    if audience.realm.lower() != issuer.realm.lower():
        raise SecurityError("issuer realm does not match audience realm")

    token_url = (
        config.token_url
        or context_token.parsed_app_context.security_token_service_uri
        or ACS_TOKEN_URL_TEMPLATE.format(realm=audience.realm)
    )
    return ExchangeRequest(
        realm=audience.realm,
        client_id=issuer.id,
        resource=audience.id,
        host=audience.host or "",
        refresh_token=context_token.refresh_token,
        token_url=token_url,
    )


def exchange_refresh_token(exchange: ExchangeRequest, config: StrategyConfig) -> TokenResponse:
    """
    POST the refresh token to the token endpoint. Single attempt, no retries.

    Raises ProviderError("failed to obtain access token") on network errors,
    non-2xx responses, or a body without ``access_token``.
    """
    data = {
        "grant_type": "refresh_token",
        "client_id": f"{config.app_id}@{exchange.realm}",
        "client_secret": config.app_secret,
        "refresh_token": exchange.refresh_token,
        "resource": exchange.resource_identifier,
    }
    try:
        resp = requests.post(exchange.token_url, data=data, timeout=config.http_timeout_seconds)
    except requests.RequestException as e:
        logger.warning("Token endpoint request failed: %s", type(e).__name__)
        raise ProviderError("failed to obtain access token") from e

    if not 200 <= resp.status_code < 300:
        logger.warning("Token endpoint returned status=%s", resp.status_code)
        raise ProviderError("failed to obtain access token", status_code=resp.status_code)

    try:
        body = resp.json()
    except ValueError as e:
        raise ProviderError("failed to obtain access token", status_code=resp.status_code) from e

    access_token = body.get("access_token") if isinstance(body, dict) else None
    if not access_token:
        logger.warning("Token endpoint response has no access_token")
        raise ProviderError("failed to obtain access token", status_code=resp.status_code)

    expires_in = body.get("expires_in")
    return TokenResponse(
        access_token=str(access_token),
        refresh_token=body.get("refresh_token"),
        token_type=body.get("token_type"),
        expires_in=int(expires_in) if str(expires_in or "").isdigit() else None,
        params=body,
    )

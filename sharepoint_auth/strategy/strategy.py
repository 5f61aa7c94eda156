"""
SharePoint add-in authentication strategy.

``SharePointStrategy.authenticate`` is the single entry point for a host
framework. It never raises: every path ends in exactly one outcome.

    no token, GET          -> Redirect(appredirect.aspx URL)
    ?error=...             -> Fail()
    context token posted   -> verify, exchange -> Success | Fail | Error
    POST without token     -> Error(ProtocolError)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .authorize import build_authorization_url, resolve_callback_url
from .config import StrategyConfig
from .context import SharePointProfile
from .errors import ProtocolError, SecurityError, SharePointAuthError
from .outcome import AuthOutcome, Error, Fail, Redirect, Success
from .profile_client import fetch_user_profile
from .token_client import build_exchange_request, exchange_refresh_token
from .validator import ContextTokenValidator

logger = logging.getLogger(__name__)

# Field names SharePoint uses for the context token, in lookup order.
TOKEN_FIELDS = ("AppContext", "AppContextToken", "AccessToken", "SPAppToken")

VerifyCallback = Callable[[str, str | None, SharePointProfile], Any]


@dataclass(frozen=True)
class AuthRequest:
    """The parts of an inbound HTTP request the strategy reads."""

    method: str = "GET"
    query: Mapping[str, str] = field(default_factory=dict)
    body: Mapping[str, str] = field(default_factory=dict)
    base_url: str | None = None

    def context_token(self) -> str | None:
        for source in (self.body, self.query):
            for name in TOKEN_FIELDS:
                value = source.get(name)
                if value:
                    return value
        return None


class SharePointStrategy:
    """
    Verifies SharePoint context tokens and trades them for access tokens.

    ``verify`` receives ``(access_token, refresh_token, profile)`` and returns
    the user object for the host, or None to refuse authentication. Without
    it, the profile is the user.
    """

    name = "sharepoint"

    def __init__(
        self,
        config: StrategyConfig,
        verify: VerifyCallback | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._verify = verify
        self._validator = ContextTokenValidator(config, clock=clock)

    @property
    def config(self) -> StrategyConfig:
        return self._config

    def authenticate(
        self,
        request: AuthRequest,
        *,
        callback_url: str | None = None,
        sp_site_url: str | None = None,
    ) -> AuthOutcome:
        # SPHostUrl is request input: only a fallback, and never trusted with
        # the access token.
        site_url = sp_site_url or self._config.sp_site_url
        site_trusted = bool(site_url)
        if not site_url:
            site_url = request.query.get("SPHostUrl")

        if request.query.get("error"):
            # IdP denial is a failed login, not an error.
            logger.info("Identity provider returned error=%s", request.query.get("error"))
            return Fail()

        token = request.context_token()
        try:
            if token:
                return self._authenticate_token(token, site_url, site_trusted)

            if request.method.upper() == "POST":
                raise ProtocolError("missing context token")

            callback = resolve_callback_url(callback_url or self._config.callback_url, request.base_url)
            return Redirect(build_authorization_url(self._config, callback, site_url))
        except SharePointAuthError as e:
            logger.warning("SharePoint authentication error kind=%s: %s", e.kind, e)
            return Error(e)
        except Exception as e:
            logger.exception("Unexpected error during SharePoint authentication")
            return Error(e)

    def _authenticate_token(self, token: str, site_url: str | None, site_trusted: bool) -> AuthOutcome:
        context_token = self._validator.validate(token)
        exchange = build_exchange_request(context_token, self._config)
        tokens = exchange_refresh_token(exchange, self._config)

        app_context = context_token.parsed_app_context
        profile = SharePointProfile(
            id=app_context.cache_key or context_token.jwt_id or exchange.resource,
            host=exchange.host,
            realm=exchange.realm,
            site_url=site_url,
            cache_key=app_context.cache_key,
        )
        if not self._config.skip_user_profile:
            if site_url and not site_trusted:
                raise SecurityError("untrusted site URL for profile request")
            profile = fetch_user_profile(tokens.access_token, profile, self._config)

        refresh_token = tokens.refresh_token or context_token.refresh_token
        if self._verify is None:
            user = profile
        else:
            try:
                user = self._verify(tokens.access_token, refresh_token, profile)
            except Exception as e:
                logger.exception("verify callback raised")
                return Error(e)
            if user is None:
                logger.info("verify callback refused user id=%s", profile.id)
                return Fail()

        logger.info("SharePoint authentication succeeded realm=%s host=%s", exchange.realm, exchange.host)
        return Success(user=user, access_token=tokens.access_token, refresh_token=refresh_token)

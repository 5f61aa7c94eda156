"""Strategy configuration. Built from settings; no hardcoded secrets."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import ConfigurationError

DEFAULT_AUTHORIZATION_PATH = "/_layouts/15/appredirect.aspx"


@dataclass(frozen=True)
class StrategyConfig:
    """
    SharePoint add-in registration used by ``SharePointStrategy``.

    Required:
        app_id: Client id of the add-in (from AppRegNew.aspx).
        app_secret: Client secret; also the HMAC key of the context token.

    Optional:
        callback_url: Redirect URI sent to appredirect.aspx. May be relative,
            in which case it is resolved against the request's base URL.
        sp_site_url: SharePoint site that issues context tokens. Required at
            redirect time unless the request carries ``SPHostUrl``.
        authorization_path: Path of the app redirect page on the site.
        token_url: Token endpoint override. When unset, the STS URI from the
            context token (or the ACS default for the realm) is used.
        clock_skew_seconds: Tolerance for exp/nbf (default 0).
        skip_user_profile: When False, fetch ``_api/web/currentuser`` after
            the exchange.
        http_timeout_seconds: Timeout for token and profile requests.
    """

    app_id: str
    app_secret: str
    callback_url: str | None = None
    sp_site_url: str | None = None
    authorization_path: str = DEFAULT_AUTHORIZATION_PATH
    token_url: str | None = None
    clock_skew_seconds: int = 0
    skip_user_profile: bool = True
    http_timeout_seconds: float = 10.0

    def __post_init__(self) -> None:
        if not self.app_id or not self.app_secret:
            raise ConfigurationError("SharePoint strategy requires an app id and an app secret.")

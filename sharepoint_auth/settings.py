from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from sharepoint_auth.strategy.config import DEFAULT_AUTHORIZATION_PATH, StrategyConfig
from sharepoint_auth.strategy.errors import ConfigurationError


class Settings(BaseSettings):
    """
    App settings.

    Notes:
    - Every field can be set via a ``SHAREPOINT_`` env var, e.g.
      ``SHAREPOINT_APP_ID`` / ``SHAREPOINT_APP_SECRET``.
    - The secret is only read here and handed to ``StrategyConfig``; never log it.
    """

    model_config = SettingsConfigDict(env_prefix="SHAREPOINT_", extra="ignore")

    app_id: str | None = None
    app_secret: str | None = None
    callback_url: str | None = None
    sp_site_url: str | None = None
    authorization_path: str = DEFAULT_AUTHORIZATION_PATH
    token_url: str | None = None
    clock_skew_seconds: int = 0
    skip_user_profile: bool = True
    http_timeout_seconds: float = 10.0
    log_level: str = "INFO"

    def strategy_config(self) -> StrategyConfig:
        if not self.app_id or not self.app_secret:
            raise ConfigurationError("SHAREPOINT_APP_ID and SHAREPOINT_APP_SECRET must be set")
        return StrategyConfig(
            app_id=self.app_id.strip(),
            app_secret=self.app_secret.strip(),
            callback_url=_strip_or_none(self.callback_url),
            sp_site_url=_strip_or_none(self.sp_site_url),
            authorization_path=self.authorization_path,
            token_url=_strip_or_none(self.token_url),
            clock_skew_seconds=self.clock_skew_seconds,
            skip_user_profile=self.skip_user_profile,
            http_timeout_seconds=self.http_timeout_seconds,
        )


def _strip_or_none(s: str | None) -> str | None:
    if s is None:
        return None
    t = s.strip()
    return t if t else None


@lru_cache
def get_settings() -> Settings:
    return Settings()

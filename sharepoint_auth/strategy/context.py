"""Decoded context token and the profile handed to the host after success."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from .errors import ProtocolError


@dataclass(frozen=True)
class AppContext:
    """The ``appctx`` claim: a JSON document embedded as a string."""

    cache_key: str | None
    security_token_service_uri: str | None

    @classmethod
    def parse(cls, raw: str | None) -> AppContext:
        if not raw:
            return cls(cache_key=None, security_token_service_uri=None)
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise ProtocolError("malformed appctx claim: not JSON") from e
        if not isinstance(data, dict):
            raise ProtocolError("malformed appctx claim: not an object")
        return cls(
            cache_key=_str_or_none(data.get("CacheKey")),
            security_token_service_uri=_str_or_none(data.get("SecurityTokenServiceUri")),
        )


@dataclass(frozen=True)
class ContextToken:
    """
    Claims of a verified SharePoint context token.

    Only ever constructed from a payload whose signature and lifetime were
    checked by ``ContextTokenValidator``.
    """

    audience: str
    issuer: str
    not_before: int | None
    expires_at: int
    app_context_sender: str | None
    app_context: str | None
    """Raw ``appctx`` JSON string; see ``parsed_app_context``."""

    refresh_token: str
    is_browser_hosted_app: bool
    jwt_id: str | None
    issued_at: int | None

    @property
    def parsed_app_context(self) -> AppContext:
        return AppContext.parse(self.app_context)

    @classmethod
    def from_claims(cls, payload: dict[str, Any]) -> ContextToken:
        for name in ("aud", "iss", "exp", "refreshtoken"):
            if payload.get(name) in (None, ""):
                raise ProtocolError(f"malformed token: missing claim '{name}'")

        return cls(
            audience=str(payload["aud"]),
            issuer=str(payload["iss"]),
            not_before=_int_or_none(payload.get("nbf"), "nbf"),
            expires_at=_int_or_none(payload["exp"], "exp"),
            app_context_sender=_str_or_none(payload.get("appctxsender")),
            app_context=_str_or_none(payload.get("appctx")),
            refresh_token=str(payload["refreshtoken"]),
            # SharePoint sends this as the string "true"/"false".
            is_browser_hosted_app=str(payload.get("isbrowserhostedapp", "")).lower() == "true",
            jwt_id=_str_or_none(payload.get("jti")),
            issued_at=_int_or_none(payload.get("iat"), "iat"),
        )


@dataclass(frozen=True)
class SharePointProfile:
    """
    Minimal identity for the host application.

    The context-token flow has no guaranteed profile endpoint, so only the
    principal fields are always set. ``username``/``display_name``/``emails``
    come from ``_api/web/currentuser`` when profile fetching is enabled.
    """

    id: str
    host: str | None
    realm: str
    site_url: str | None
    cache_key: str | None
    provider: str = "sharepoint"
    username: str | None = None
    display_name: str | None = None
    emails: tuple[str, ...] = ()
    raw: dict[str, Any] = field(default_factory=dict, compare=False)

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable dict (without ``raw``)."""
        return {
            "provider": self.provider,
            "id": self.id,
            "host": self.host,
            "realm": self.realm,
            "site_url": self.site_url,
            "cache_key": self.cache_key,
            "username": self.username,
            "display_name": self.display_name,
            "emails": list(self.emails),
        }


def _str_or_none(value: Any) -> str | None:
    if value is None:
        return None
    s = str(value)
    return s if s else None


def _int_or_none(value: Any, claim: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ProtocolError(f"malformed token: claim '{claim}' is not a timestamp")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ProtocolError(f"malformed token: claim '{claim}' is not a timestamp") from e

"""
Error taxonomy for the SharePoint strategy.

Every failure inside the verification pipeline is raised as one of these and
converted into an ``Error`` outcome by ``SharePointStrategy.authenticate``.
Messages must never contain the token or the app secret.
"""

from __future__ import annotations


class SharePointAuthError(Exception):
    """Base class for all strategy errors."""

    kind = "internal"


class ConfigurationError(SharePointAuthError):
    """Required configuration is missing (e.g. no site URL at redirect time)."""

    kind = "configuration"


class ProtocolError(SharePointAuthError):
    """The request or token is malformed. Never treated as authenticated."""

    kind = "protocol"


class SecurityError(SharePointAuthError):
    """Signature, lifetime or realm checks failed."""

    kind = "security"


class ProviderError(SharePointAuthError):
    """The token endpoint (or profile endpoint) failed or returned an error."""

    kind = "provider"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

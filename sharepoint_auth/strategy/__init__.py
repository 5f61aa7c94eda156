"""
SharePoint add-in authentication strategy.

Framework-independent: feed an ``AuthRequest`` to
``SharePointStrategy.authenticate`` and dispatch on the returned outcome.
"""

from .config import StrategyConfig
from .context import ContextToken, SharePointProfile
from .errors import ConfigurationError, ProtocolError, ProviderError, SecurityError, SharePointAuthError
from .outcome import AuthOutcome, Error, Fail, Redirect, Success
from .strategy import AuthRequest, SharePointStrategy

__all__ = [
    "AuthOutcome",
    "AuthRequest",
    "ConfigurationError",
    "ContextToken",
    "Error",
    "Fail",
    "ProtocolError",
    "ProviderError",
    "Redirect",
    "SecurityError",
    "SharePointAuthError",
    "SharePointProfile",
    "SharePointStrategy",
    "StrategyConfig",
    "Success",
]

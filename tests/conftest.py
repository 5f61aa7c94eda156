"""
Pytest fixtures for the test suite.

Context tokens are minted with PyJWT using the same claim layout SharePoint
sends (see the sample in "Inside SharePoint 2013 OAuth Context Tokens").
The strategy clock is pinned to ``NOW`` so lifetime checks are deterministic.
"""
from __future__ import annotations

import json
from typing import Any

import jwt
import pytest

from sharepoint_auth.strategy import SharePointStrategy, StrategyConfig


NOW = 1_700_000_000
APP_SECRET = "test-app-secret-0123456789abcdef0123456789abcdef0123456789abcdef"
REALM = "d341a536-1d82-4267-87e6-e2dfff4fa325"
APP_PRINCIPAL = "4c2df2aa-3d14-4d84-8a79-5a75135e98d0"
ACS_PRINCIPAL = "00000001-0000-0000-c000-000000000000"
SHAREPOINT_PRINCIPAL = "00000003-0000-0ff1-ce00-000000000000"
STS_URI = "https://accounts.accesscontrol.windows.net/tokens/OAuth/2"
CACHE_KEY = "em1/saZohTOS4nOUZHXMb8QJgyNbkEO86TSe5j9WYmo="


def default_claims() -> dict[str, Any]:
    return {
        "aud": f"{APP_PRINCIPAL}/localhost:44346@{REALM}",
        "iss": f"{ACS_PRINCIPAL}@{REALM}",
        "nbf": NOW - 60,
        "exp": NOW + 3600,
        "appctxsender": f"{SHAREPOINT_PRINCIPAL}@{REALM}",
        "appctx": json.dumps({"CacheKey": CACHE_KEY, "SecurityTokenServiceUri": STS_URI}),
        "refreshtoken": "IAAAANc8bAVMWZceOsdfgsdfggbfm7oU",
        "isbrowserhostedapp": "true",
        "jti": "59da040f-46f2-4dc1-90ab-1b1af906db0d",
        "iat": NOW - 60,
    }


@pytest.fixture
def claims() -> dict[str, Any]:
    """A fresh copy of the default context-token claims."""
    return default_claims()


@pytest.fixture
def make_token():
    """Return a function that signs claims into a context token."""

    def _make(payload: dict[str, Any] | None = None, *, secret: str = APP_SECRET, algorithm: str = "HS256") -> str:
        return jwt.encode(payload if payload is not None else default_claims(), secret, algorithm=algorithm)

    return _make


@pytest.fixture
def config() -> StrategyConfig:
    return StrategyConfig(
        app_id="ABC123",
        app_secret=APP_SECRET,
        callback_url="htto://foo.com",
        sp_site_url="http://www.sharepoint.com",
    )


@pytest.fixture
def strategy(config: StrategyConfig) -> SharePointStrategy:
    return SharePointStrategy(config, clock=lambda: NOW)

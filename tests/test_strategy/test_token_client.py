"""Tests for exchange-parameter derivation and the token endpoint call (mocked)."""

from dataclasses import replace
from unittest.mock import patch

import pytest
import requests

from sharepoint_auth.strategy.context import ContextToken
from sharepoint_auth.strategy.errors import ProtocolError, ProviderError, SecurityError
from sharepoint_auth.strategy.token_client import (
    ExchangeRequest,
    build_exchange_request,
    exchange_refresh_token,
)

from conftest import ACS_PRINCIPAL, APP_PRINCIPAL, REALM, STS_URI


def _exchange(**overrides) -> ExchangeRequest:
    values = dict(
        realm=REALM,
        client_id=ACS_PRINCIPAL,
        resource=APP_PRINCIPAL,
        host="localhost:44346",
        refresh_token="refresh-1",
        token_url=STS_URI,
    )
    values.update(overrides)
    return ExchangeRequest(**values)


def test_build_exchange_request(claims, config):
    exchange = build_exchange_request(ContextToken.from_claims(claims), config)
    assert exchange == _exchange(refresh_token=claims["refreshtoken"])
    assert exchange.resource_identifier == f"{APP_PRINCIPAL}/localhost:44346@{REALM}"


def test_build_exchange_request_token_url_override(claims, config):
    cfg = replace(config, token_url="https://sts.example.com/token")
    exchange = build_exchange_request(ContextToken.from_claims(claims), cfg)
    assert exchange.token_url == "https://sts.example.com/token"


def test_build_exchange_request_defaults_to_acs_for_realm(claims, config):
    del claims["appctx"]
    exchange = build_exchange_request(ContextToken.from_claims(claims), config)
    assert exchange.token_url == f"https://accounts.accesscontrol.windows.net/{REALM}/tokens/OAuth/2"


def test_build_exchange_request_realm_mismatch(claims, config):
    claims["iss"] = f"{ACS_PRINCIPAL}@11111111-1111-1111-1111-111111111111"
    with pytest.raises(SecurityError, match="realm"):
        build_exchange_request(ContextToken.from_claims(claims), config)


def test_build_exchange_request_audience_without_host(claims, config):
    claims["aud"] = f"{APP_PRINCIPAL}@{REALM}"
    with pytest.raises(ProtocolError, match="missing host"):
        build_exchange_request(ContextToken.from_claims(claims), config)


@patch("sharepoint_auth.strategy.token_client.requests.post")
def test_exchange_posts_refresh_token_grant(mock_post, config):
    mock_post.return_value.status_code = 200
    mock_post.return_value.json.return_value = {
        "token_type": "Bearer",
        "access_token": "sp-access-token",
        "expires_in": "43199",
    }
    tokens = exchange_refresh_token(_exchange(), config)

    assert tokens.access_token == "sp-access-token"
    assert tokens.refresh_token is None
    assert tokens.token_type == "Bearer"
    assert tokens.expires_in == 43199

    args, kwargs = mock_post.call_args
    assert args == (STS_URI,)
    assert kwargs["data"] == {
        "grant_type": "refresh_token",
        "client_id": f"ABC123@{REALM}",
        "client_secret": config.app_secret,
        "refresh_token": "refresh-1",
        "resource": f"{APP_PRINCIPAL}/localhost:44346@{REALM}",
    }
    assert kwargs["timeout"] == config.http_timeout_seconds


@patch("sharepoint_auth.strategy.token_client.requests.post")
def test_exchange_network_error(mock_post, config):
    mock_post.side_effect = requests.ConnectionError("boom")
    with pytest.raises(ProviderError, match="failed to obtain access token") as exc_info:
        exchange_refresh_token(_exchange(), config)
    assert isinstance(exc_info.value.__cause__, requests.ConnectionError)
    assert exc_info.value.status_code is None


@patch("sharepoint_auth.strategy.token_client.requests.post")
def test_exchange_non_2xx(mock_post, config):
    mock_post.return_value.status_code = 400
    mock_post.return_value.json.return_value = {"error": "invalid_grant"}
    with pytest.raises(ProviderError, match="failed to obtain access token") as exc_info:
        exchange_refresh_token(_exchange(), config)
    assert exc_info.value.status_code == 400


@patch("sharepoint_auth.strategy.token_client.requests.post")
def test_exchange_missing_access_token(mock_post, config):
    mock_post.return_value.status_code = 200
    mock_post.return_value.json.return_value = {"token_type": "Bearer"}
    with pytest.raises(ProviderError, match="failed to obtain access token"):
        exchange_refresh_token(_exchange(), config)


@patch("sharepoint_auth.strategy.token_client.requests.post")
def test_exchange_body_not_json(mock_post, config):
    mock_post.return_value.status_code = 200
    mock_post.return_value.json.side_effect = ValueError("no json")
    with pytest.raises(ProviderError, match="failed to obtain access token"):
        exchange_refresh_token(_exchange(), config)

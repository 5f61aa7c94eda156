"""Tests for the appredirect.aspx authorization URL."""

from dataclasses import replace

import pytest

from sharepoint_auth.strategy.authorize import build_authorization_url, resolve_callback_url
from sharepoint_auth.strategy.errors import ConfigurationError


def test_authorization_url(config):
    assert build_authorization_url(config) == (
        "http://www.sharepoint.com/_layouts/15/appredirect.aspx"
        "?response_type=code&redirect_uri=htto%3A%2F%2Ffoo.com&client_id=ABC123"
    )


def test_authorization_url_requires_site(config):
    with pytest.raises(ConfigurationError, match="requires a site URL"):
        build_authorization_url(replace(config, sp_site_url=None))


def test_authorization_url_overrides(config):
    url = build_authorization_url(
        replace(config, sp_site_url=None),
        callback_url="https://app.example.com/cb?x=1",
        sp_site_url="https://contoso.sharepoint.com/sites/dev/",
    )
    assert url == (
        "https://contoso.sharepoint.com/sites/dev/_layouts/15/appredirect.aspx"
        "?response_type=code&redirect_uri=https%3A%2F%2Fapp.example.com%2Fcb%3Fx%3D1&client_id=ABC123"
    )


def test_authorization_path_override(config):
    url = build_authorization_url(replace(config, authorization_path="/_layouts/appredirect.aspx"))
    assert url.startswith("http://www.sharepoint.com/_layouts/appredirect.aspx?")


@pytest.mark.parametrize(
    "callback, base, expected",
    [
        (None, "http://app/", None),
        ("htto://foo.com", "http://app/", "htto://foo.com"),
        ("/auth/sharepoint/callback", "https://app.example.com/", "https://app.example.com/auth/sharepoint/callback"),
        ("/auth/sharepoint/callback", None, "/auth/sharepoint/callback"),
    ],
)
def test_resolve_callback_url(callback, base, expected):
    assert resolve_callback_url(callback, base) == expected

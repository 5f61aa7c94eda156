from __future__ import annotations

from pydantic import BaseModel


class ProfileOut(BaseModel):
    provider: str
    id: str
    host: str | None = None
    realm: str
    site_url: str | None = None
    cache_key: str | None = None
    username: str | None = None
    display_name: str | None = None
    emails: list[str] = []


class AuthSuccessOut(BaseModel):
    user: ProfileOut
    access_token: str
    refresh_token: str | None = None


class AuthErrorOut(BaseModel):
    error: str
    detail: str

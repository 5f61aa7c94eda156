"""
Authentication outcomes reported to the host framework.

``authenticate`` returns exactly one of ``Redirect``, ``Success``, ``Fail``
or ``Error``. Hosts dispatch on the type (see ``sharepoint_auth.routers.auth``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from .errors import SharePointAuthError


@dataclass(frozen=True)
class Redirect:
    url: str


@dataclass(frozen=True)
class Success:
    user: Any
    access_token: str
    refresh_token: str | None = None


@dataclass(frozen=True)
class Fail:
    """Authentication was refused (IdP denial or rejected by ``verify``)."""

    info: Any = None


@dataclass(frozen=True)
class Error:
    cause: Exception

    @property
    def kind(self) -> str:
        if isinstance(self.cause, SharePointAuthError):
            return self.cause.kind
        return "internal"


AuthOutcome = Union[Redirect, Success, Fail, Error]

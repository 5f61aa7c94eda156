"""
Parser for SharePoint compound principal identifiers.

Context token ``aud``, ``iss`` and ``appctxsender`` claims are written as::

    {principal guid}[/{host}]@{realm guid}

e.g. ``4c2df2aa-3d14-4d84-8a79-5a75135e98d0/localhost:44346@d341a536-...``.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from .errors import ProtocolError


@dataclass(frozen=True)
class Principal:
    id: str
    realm: str
    host: str | None = None

    def __str__(self) -> str:
        if self.host:
            return f"{self.id}/{self.host}@{self.realm}"
        return f"{self.id}@{self.realm}"


def _require_guid(value: str, claim: str, segment: str) -> str:
    if not value:
        raise ProtocolError(f"malformed {claim} claim: empty {segment}")
    try:
        uuid.UUID(value)
    except ValueError as e:
        raise ProtocolError(f"malformed {claim} claim: {segment} is not a GUID") from e
    return value


def parse_principal(value: object, claim: str, *, require_host: bool = False) -> Principal:
    """
    Parse ``{guid}[/{host}]@{realm}``.

    Raises ProtocolError naming the claim and the offending segment.
    """
    if not isinstance(value, str) or not value:
        raise ProtocolError(f"malformed token: missing claim '{claim}'")

    principal_part, sep, realm = value.rpartition("@")
    if not sep:
        raise ProtocolError(f"malformed {claim} claim: missing realm")

    principal_id, slash, host = principal_part.partition("/")
    if slash and not host:
        raise ProtocolError(f"malformed {claim} claim: empty host")
    if require_host and not host:
        raise ProtocolError(f"malformed {claim} claim: missing host")

    return Principal(
        id=_require_guid(principal_id, claim, "principal id"),
        realm=_require_guid(realm, claim, "realm"),
        host=host or None,
    )

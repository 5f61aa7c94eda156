"""
Verify SharePoint context tokens.

Background for newcomers:
    When SharePoint launches a provider-hosted add-in it POSTs a *context
    token* to the add-in (form field ``SPAppToken`` and friends). It is a JWT
    signed with HMAC using the add-in's client secret. Before we trust
    **anything** in that token we must:

    1. Check it is shaped like a JWT (three dot-separated segments).
    2. Check the header names an HMAC algorithm we accept. ``none`` and
       asymmetric algorithms are rejected outright.
    3. Verify the **signature** with our client secret.
    4. Check it hasn't **expired** (``exp``) and isn't used before its start
       time (``nbf``).

    Only after these pass do we read the claims and build a ``ContextToken``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

import jwt

from .config import StrategyConfig
from .context import ContextToken
from .errors import ProtocolError, SecurityError

logger = logging.getLogger(__name__)

ALLOWED_ALGORITHMS = ("HS256", "HS384", "HS512")


def _get_algorithm(token: str) -> str:
    """Read ``alg`` from the JWT header **without** verifying the token."""
    try:
        header = jwt.get_unverified_header(token)
    except jwt.DecodeError as e:
        raise ProtocolError("malformed token: undecodable header") from e
    alg = header.get("alg") if isinstance(header, dict) else None
    if not isinstance(alg, str) or alg not in ALLOWED_ALGORITHMS:
        raise ProtocolError("algorithm not supported")
    return alg


class ContextTokenValidator:
    """
    Validates context tokens against the add-in's client secret.

    Holds only read-only configuration; safe to share between requests.
    ``clock`` returns the current time in epoch seconds and exists so lifetime
    checks can be pinned in tests.
    """

    def __init__(self, config: StrategyConfig, clock: Callable[[], float] = time.time) -> None:
        self._config = config
        self._clock = clock

    def decode(self, token: str) -> dict[str, Any]:
        """
        Check shape, algorithm and signature; return the raw payload.

        Lifetime is not checked here; use ``validate``.
        """
        if token.count(".") != 2:
            logger.debug("Context token has wrong segment count")
            raise ProtocolError("malformed token: not enough or too many segments")

        alg = _get_algorithm(token)

        try:
            # PyJWT compares HMAC digests with hmac.compare_digest.
            return jwt.decode(
                token,
                self._config.app_secret,
                algorithms=[alg],
                options={
                    "verify_signature": True,
                    "verify_exp": False,
                    "verify_nbf": False,
                    "verify_iat": False,
                    "verify_iss": False,
                    "verify_aud": False,
                },
            )
        except jwt.InvalidSignatureError as e:
            logger.info("Context token signature mismatch")
            raise SecurityError("signature verification failed") from e
        except jwt.InvalidAlgorithmError as e:
            raise ProtocolError("algorithm not supported") from e
        except jwt.InvalidTokenError as e:
            logger.info("Context token undecodable: %s", type(e).__name__)
            raise ProtocolError("malformed token") from e

    def check_lifetime(self, context_token: ContextToken) -> None:
        now = self._clock()
        skew = self._config.clock_skew_seconds
        if now >= context_token.expires_at + skew:
            logger.info("Context token expired")
            raise SecurityError("token expired")
        if context_token.not_before is not None and now < context_token.not_before - skew:
            logger.info("Context token not yet valid")
            raise SecurityError("token not yet valid")

    def validate(self, token: str) -> ContextToken:
        """
        Verify the raw context token and return its claims.

        Raises ProtocolError for malformed tokens and SecurityError for
        signature or lifetime failures.
        """
        payload = self.decode(token)
        context_token = ContextToken.from_claims(payload)
        self.check_lifetime(context_token)
        return context_token

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, RedirectResponse, Response

from sharepoint_auth.dependencies import get_auth_request, get_strategy
from sharepoint_auth.schemas.auth import AuthErrorOut, AuthSuccessOut, ProfileOut
from sharepoint_auth.strategy import (
    AuthOutcome,
    AuthRequest,
    Error,
    Fail,
    Redirect,
    SharePointProfile,
    SharePointStrategy,
    Success,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth/sharepoint", tags=["auth"])

ERROR_STATUS = {
    "configuration": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "protocol": status.HTTP_400_BAD_REQUEST,
    "security": status.HTTP_401_UNAUTHORIZED,
    "provider": status.HTTP_502_BAD_GATEWAY,
}


def outcome_response(outcome: AuthOutcome) -> Response:
    """Map a strategy outcome onto an HTTP response."""

    if isinstance(outcome, Redirect):
        return RedirectResponse(outcome.url, status_code=status.HTTP_302_FOUND)

    if isinstance(outcome, Success):
        if isinstance(outcome.user, SharePointProfile):
            body = AuthSuccessOut(
                user=ProfileOut(**outcome.user.to_dict()),
                access_token=outcome.access_token,
                refresh_token=outcome.refresh_token,
            ).model_dump()
        else:
            body = {
                "user": jsonable_encoder(outcome.user),
                "access_token": outcome.access_token,
                "refresh_token": outcome.refresh_token,
            }
        return JSONResponse(body)

    if isinstance(outcome, Fail):
        out = AuthErrorOut(error="unauthorized", detail="Authentication failed")
        return JSONResponse(out.model_dump(), status_code=status.HTTP_401_UNAUTHORIZED)

    if isinstance(outcome, Error):
        kind = outcome.kind
        # Errors raised by user code are not echoed back to the client.
        detail = str(outcome.cause) if kind in ERROR_STATUS else "Internal error"
        out = AuthErrorOut(error=kind, detail=detail)
        return JSONResponse(
            out.model_dump(),
            status_code=ERROR_STATUS.get(kind, status.HTTP_500_INTERNAL_SERVER_ERROR),
        )

    raise TypeError(f"Unknown authentication outcome: {type(outcome).__name__}")


@router.get("")
def login(
    auth_request: AuthRequest = Depends(get_auth_request),
    strategy: SharePointStrategy = Depends(get_strategy),
) -> Response:
    return outcome_response(strategy.authenticate(auth_request))


@router.api_route("/callback", methods=["GET", "POST"])
def callback(
    auth_request: AuthRequest = Depends(get_auth_request),
    strategy: SharePointStrategy = Depends(get_strategy),
) -> Response:
    # Sync handler: FastAPI runs it in the threadpool, so the blocking
    # token exchange does not stall the event loop.
    outcome = strategy.authenticate(auth_request)
    logger.debug("Callback outcome=%s", type(outcome).__name__)
    return outcome_response(outcome)

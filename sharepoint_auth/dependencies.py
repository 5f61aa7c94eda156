from __future__ import annotations

from fastapi import Request

from sharepoint_auth.strategy import AuthRequest, SharePointStrategy


def get_strategy(request: Request) -> SharePointStrategy:
    strategy = getattr(request.app.state, "strategy", None)
    if strategy is None:
        raise RuntimeError("SharePoint strategy not configured. Did app startup run?")
    return strategy


async def get_auth_request(request: Request) -> AuthRequest:
    """
    Translate the FastAPI request into the strategy's ``AuthRequest``.

    Only form bodies are read; SharePoint posts the context token as
    ``application/x-www-form-urlencoded``.
    """

    body: dict[str, str] = {}
    content_type = request.headers.get("content-type", "")
    if request.method.upper() == "POST" and (
        content_type.startswith("application/x-www-form-urlencoded") or content_type.startswith("multipart/form-data")
    ):
        form = await request.form()
        body = {k: v for k, v in form.items() if isinstance(v, str)}

    return AuthRequest(
        method=request.method,
        query=dict(request.query_params),
        body=body,
        base_url=str(request.base_url),
    )

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from sharepoint_auth.logging_config import configure_app_logging
from sharepoint_auth.routers import auth, health
from sharepoint_auth.settings import get_settings
from sharepoint_auth.strategy import SharePointStrategy


def create_app(strategy: SharePointStrategy | None = None) -> FastAPI:
    """
    Build the host application.

    Pass ``strategy`` to skip loading configuration from the environment
    (tests, or embedding with a custom ``verify`` callback).
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        settings = get_settings()
        configure_app_logging(settings.log_level)

        logger = logging.getLogger(__name__)
        logger.info("App startup beginning")

        if getattr(app.state, "strategy", None) is None:
            app.state.strategy = SharePointStrategy(settings.strategy_config())
        logger.info("SharePoint strategy ready app_id=%s", app.state.strategy.config.app_id)

        yield
        # Shutdown (the strategy holds no resources)

    app = FastAPI(lifespan=lifespan)
    app.state.strategy = strategy

    app.include_router(health.router)
    app.include_router(auth.router)

    return app


app = create_app()

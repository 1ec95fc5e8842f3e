"""FastAPI application serving the portfolio page."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

from ..config import Config
from ..sources import build_source
from ..widget import NowPlayingWidget
from .routes import pages, spotify, system

logger = logging.getLogger("folio.gateway")


def create_app(config: Config, widget: Optional[NowPlayingWidget] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    The widget is mounted when the application starts and unmounted when it
    shuts down.

    Args:
        config: Configuration instance
        widget: Optional pre-built widget; one is built from config otherwise

    Returns:
        Configured FastAPI application
    """
    client: Optional[httpx.AsyncClient] = None
    if widget is None:
        client = httpx.AsyncClient()
        widget = NowPlayingWidget(
            build_source(config, client),
            poll_interval=config.poll_interval,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        widget.mount()
        try:
            yield
        finally:
            await widget.unmount()
            if client is not None:
                await client.aclose()

    app = FastAPI(
        title="folio",
        description="Portfolio page with a now-playing widget",
        version="0.1.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    # Store shared objects in app state
    app.state.config = config
    app.state.widget = widget
    app.state.http_client = client

    templates_dir = Path(__file__).parent / "templates"
    app.state.templates = Jinja2Templates(directory=str(templates_dir))

    app.include_router(pages.router, tags=["Pages"])
    app.include_router(spotify.router, prefix="/api/spotify", tags=["Spotify"])
    app.include_router(system.router, prefix="/api", tags=["System"])

    logger.info("Gateway application created")
    return app

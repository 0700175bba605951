"""Entry point for media-browser-api FastAPI application.

Usage:
    uvicorn media_browser.main:app --host 0.0.0.0 --port 5000
    python -m media_browser.main
"""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from media_browser.api.filesystem import router as filesystem_router
from media_browser.api.media import router as media_router
from media_browser.api.root import router as root_router
from media_browser.config import get_settings
from media_browser.storage.root import get_root_store


def _configure_logging(level: str) -> None:
    """Initialize structured logging once for the service."""

    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger("media_browser").setLevel(level)


def create_app() -> FastAPI:
    """Create a new FastAPI instance with registered routers.

    Fails fast when the configured root directory does not exist.
    """

    settings = get_settings()
    _configure_logging(settings.log_level)
    get_root_store()

    application = FastAPI(title="media-browser-api", version="0.1.0")
    if settings.cors_origins:
        application.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["GET", "HEAD", "PUT"],
            allow_headers=["*"],
            expose_headers=["Content-Range", "Accept-Ranges", "Content-Length"],
        )
    application.include_router(filesystem_router)
    application.include_router(media_router)
    application.include_router(root_router)

    @application.get("/health")
    async def healthcheck():
        root = get_root_store().current()
        return {
            "status": "healthy",
            "service": "media-browser-api",
            "root_directory": str(root.path),
        }

    @application.get("/healthz")
    async def legacy_healthcheck():
        return {"status": "ok"}

    return application


app = create_app()


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run("media_browser.main:app", host=settings.host, port=settings.port, reload=False)

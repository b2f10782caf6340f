from __future__ import annotations

import argparse
import dataclasses
import logging
import time
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from cms_proxy.core.cms import CmsClient
from cms_proxy.core.config import Settings, load_settings
from cms_proxy.core.errors import ApiError, api_error_handler
from cms_proxy.deficiencies import router as deficiencies_router
from cms_proxy.facilities import router as facilities_router

HEALTH_MESSAGE = "CMS proxy backend running"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,
    )


def create_app(
    settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # One upstream client per app instance; closed on shutdown.
        app.state.cms_client = CmsClient(
            base_url=settings.cms_base_url,
            timeout_s=settings.cms_timeout_s,
            transport=transport,
        )
        try:
            yield
        finally:
            await app.state.cms_client.aclose()
            app.state.cms_client = None

    app = FastAPI(title="CMS Facility Proxy", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "request method=%s path=%s status=%s duration_ms=%.1f",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    # Frontend dev servers call this API straight from the browser.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ApiError, api_error_handler)

    app.include_router(facilities_router.router, prefix="/api", tags=["facilities"])
    app.include_router(deficiencies_router.router, prefix="/api", tags=["deficiencies"])

    @app.get("/api/health")
    def health() -> dict:
        return {"status": "ok", "message": HEALTH_MESSAGE}

    return app


def run(settings: Settings) -> None:
    """
    Start the HTTP server for `settings` and block until it exits.
    """
    configure_logging(settings.log_level)
    logger.info("CMS proxy running on %s", settings.local_url)
    logger.info("Health check: %s/api/health", settings.local_url)
    logger.info("Frontend should call: %s/api/...", settings.local_url)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


def cli(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="CMS facility lookup proxy.")
    parser.add_argument("--host", help="bind address (default: $HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="listening port (default: $PORT or 3000)")
    args = parser.parse_args(argv)

    settings = load_settings()
    overrides = {}
    if args.host:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if overrides:
        settings = dataclasses.replace(settings, **overrides)
    run(settings)


if __name__ == "__main__":
    cli()

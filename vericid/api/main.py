"""VERICID FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from vericid.api.auth import request_logging_middleware
from vericid.config import get_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle handler."""
    config = get_config()
    if not config.api_key:
        logger.warning("VERICID_API_KEY is not set - API is open to unauthenticated callers")
    logger.info(
        "VERICID API starting - hash=%s, remote sources=%d",
        config.hash_algorithm,
        len(config.source_url_list),
    )
    yield
    logger.info("VERICID API shutdown")


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    app = FastAPI(
        title="VERICID API",
        description="Content identifiers and provenance lookup",
        version="0.1.0",
        lifespan=lifespan,
    )

    config = get_config()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    # Request logging and X-Request-ID middleware
    app.add_middleware(BaseHTTPMiddleware, dispatch=request_logging_middleware)

    from vericid.api.routes.cid import router as cid_router
    from vericid.api.routes.health import router as health_router
    from vericid.api.routes.lookup import router as lookup_router

    app.include_router(lookup_router)
    app.include_router(cid_router)
    app.include_router(health_router)

    return app


app = create_app()

"""
FastAPI application for the DomGo link service.

Serves the landing pages that inbound links point at and a small JSON API
over the link classifier and the listing backend.

Production deployment configuration via environment variables.
"""

import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from core.deeplink import LinkClassifier, LinkPatterns
from listings import BasePropertySource, get_property_source
from utils.config import Config
from utils.log_config import configure_logging

# =============================================================================
# Environment Configuration
# =============================================================================

# Production mode detection
IS_PRODUCTION = os.getenv("RAILWAY_ENVIRONMENT") is not None or os.getenv("PRODUCTION", "").lower() == "true"

# CORS configuration - locked down for production
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "").split(",") if os.getenv("ALLOWED_ORIGINS") else []
if not ALLOWED_ORIGINS and not IS_PRODUCTION:
    # Development fallback only
    ALLOWED_ORIGINS = ["http://localhost:8000", "http://127.0.0.1:8000"]

# Import link routes
from web.link_routes import router as link_router


def create_app(
    config: Optional[Config] = None,
    source: Optional[BasePropertySource] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Configuration (default: loaded from environment).
        source: Listing source (default: selected by configuration).
    """
    config = config or Config.load()
    configure_logging(config.log_level)

    debug_mode = config.debug and not IS_PRODUCTION

    app = FastAPI(
        title="DomGo Links",
        description="Landing pages and link resolution for DomGo listings",
        version="0.1.0",
        docs_url=None if IS_PRODUCTION else "/docs",
        redoc_url=None if IS_PRODUCTION else "/redoc",
        openapi_url=None if IS_PRODUCTION else "/openapi.json",
        debug=debug_mode,
    )

    # ==========================================================================
    # Healthcheck endpoints are registered first and perform no IO.
    # ==========================================================================
    @app.get("/", include_in_schema=False)
    def root():
        """Root healthcheck. No dependencies, no IO."""
        return {"status": "ok"}

    @app.get("/health", include_in_schema=False)
    def health():
        """Secondary health endpoint. No dependencies, no IO."""
        return {"status": "healthy"}

    if ALLOWED_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=ALLOWED_ORIGINS,
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    # Shared components, read by the routes through request.app.state
    patterns = LinkPatterns.from_config(config)
    app.state.config = config
    app.state.link_patterns = patterns
    app.state.link_classifier = LinkClassifier(patterns)
    app.state.property_source = source or get_property_source(config)

    app.include_router(link_router)

    @app.get("/api/health")
    async def api_health():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": "0.1.0",
            "environment": "production" if IS_PRODUCTION else "development",
            "property_source": config.property_source,
        }

    logger.info(f"DomGo link service configured (source: {config.property_source})")
    return app

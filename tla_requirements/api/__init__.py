"""
FastAPI application factory and API package.

Run with:
    uvicorn tla_requirements.api:app --reload --port 8787

Or via main.py:
    python -m tla_requirements --serve
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tla_requirements.config import get_settings
from tla_requirements.api.routes import analysis_router, health_router, prover_router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Application factory — create and configure the FastAPI instance."""
    settings = get_settings()

    application = FastAPI(
        title="TLA+ Requirements Analyzer API",
        description="Requirement extraction, temporal rewrites and the prover heuristic",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS: the analyzer UI may be served from any origin
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(health_router, tags=["Health"])
    application.include_router(prover_router, prefix="/api", tags=["Prover"])
    application.include_router(analysis_router, prefix="/api", tags=["Analysis"])

    logger.info(f"Created {settings.app_name} API")
    return application


# Module-level instance for `uvicorn tla_requirements.api:app`
app = create_app()

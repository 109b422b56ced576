"""FastAPI application factory.

Routers
-------
All endpoint groups are mounted under their respective path prefix:

    /website   — site scan, page analysis and report export
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.api.routers import website as website_router


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="Workday Website Scanner API",
        description=(
            "Crawls a college website, finds CougarWeb / Colleague references, "
            "classifies each one for the Workday migration and exports a "
            "migration report."
        ),
        version="0.1.0",
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(website_router.router, prefix="/website", tags=["website"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn backend.api.app:app --reload
app = create_app()

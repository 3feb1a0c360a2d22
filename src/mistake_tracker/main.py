# src/mistake_tracker/main.py
"""Main entry point for the Mistake Tracker application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from mistake_tracker.api.v1 import (
    ai_tools_router,
    analytics_router,
    auth_router,
    events_router,
    moderation_router,
    reports_router,
    users_router,
    votes_router,
)
from mistake_tracker.core.settings import settings
from mistake_tracker.db.session import create_tables

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

DESCRIPTION = "Crowdsourced reporting and comparison of AI tool mistakes"

# Initialize FastAPI app
app = FastAPI(
    title=f"{settings.app_name} API",
    description=DESCRIPTION,
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(reports_router, prefix="/api/v1")
app.include_router(votes_router, prefix="/api/v1")
app.include_router(moderation_router, prefix="/api/v1")
app.include_router(ai_tools_router, prefix="/api/v1")
app.include_router(analytics_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(events_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    if settings.auto_create_tables:
        create_tables()
        logger.info("Database tables ensured")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok", "version": settings.app_version}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": f"{settings.app_name} API",
        "version": settings.app_version,
        "description": DESCRIPTION,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("mistake_tracker.main:app", host="0.0.0.0", port=8000, reload=settings.debug)

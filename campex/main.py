"""CAMPEX — FastAPI Application Entry Point.

Campaign Export: pull ActiveCampaign campaigns with their messages,
validate the joins, filter, and export.
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI

from campex.config import settings
from campex.database import init_db, test_connection
from campex.scheduler.jobs import start_scheduler, stop_scheduler
from campex.api.export_routes import router as export_router
from campex.api.activecampaign_routes import router as activecampaign_router
from campex.core.logging import get_logger

logger = get_logger("main")


IS_SERVERLESS = bool(
    os.environ.get("VERCEL") or os.environ.get("AWS_LAMBDA_FUNCTION_NAME")
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("CAMPEX starting up...")
    if test_connection():
        try:
            init_db()
        except Exception as e:
            logger.error(f"Table creation failed: {e}")
    elif settings.archive_runs:
        logger.error("Database NOT connected — export archiving will fail")
    if not IS_SERVERLESS:
        start_scheduler()
    yield
    if not IS_SERVERLESS:
        stop_scheduler()
    logger.info("CAMPEX shut down")


app = FastAPI(
    title="CAMPEX",
    description="Campaign Export — page through ActiveCampaign campaigns, join messages, validate relationships, filter, export.",
    version="1.0.0",
    lifespan=lifespan,
)

# Routers
app.include_router(export_router)
app.include_router(activecampaign_router)


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "campex",
        "version": "1.0.0",
    }

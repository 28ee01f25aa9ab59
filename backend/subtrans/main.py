"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from subtrans import __version__
from subtrans.api.dependencies import get_pipeline_controller
from subtrans.api.v1.routes import cache, translation
from subtrans.config import settings
from subtrans.models.database.base import engine, get_db, init_db

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup: Initialize database
    await init_db()
    logger.info("Cache database ready at %s", settings.database_url)

    yield

    # Shutdown: stop running jobs at their next batch boundary
    cancelled = get_pipeline_controller().cancel_all()
    if cancelled:
        logger.info("Cancelled %d running jobs on shutdown", cancelled)
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Resumable subtitle translation with LLM support",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(translation.router, prefix="/api/v1", tags=["translation"])
app.include_router(cache.router, prefix="/api/v1", tags=["cache"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Subtitle Translator API", "version": __version__}


@app.get("/health")
async def health(db: AsyncSession = Depends(get_db)):
    """Health check endpoint."""
    await db.execute(text("SELECT 1"))
    return {"status": "healthy", "database": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("subtrans.main:app", host=settings.host, port=settings.port, reload=settings.debug)

"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from priority_tracker import __version__
from priority_tracker.api.errors import register_error_handlers
from priority_tracker.api.routes import (
    analytics_router,
    auth_router,
    initiatives_router,
    priorities_router,
    users_router,
    weeks_router,
)
from priority_tracker.api.schemas import HealthResponse
from priority_tracker.models import get_db, init_db
from priority_tracker.models.database import ping_database
from priority_tracker.utils.config import get_config
from priority_tracker.utils.logging_setup import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    configure_logging(get_config())
    init_db()
    logger.info(f"Priority Tracker API {__version__} started")
    yield


app = FastAPI(
    title="Priority Tracker API",
    description="Weekly priority tracking for teams, aligned to strategic initiatives.",
    version=__version__,
    lifespan=lifespan,
)

register_error_handlers(app)

# Include routers
app.include_router(auth_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(initiatives_router, prefix="/api")
app.include_router(priorities_router, prefix="/api")
app.include_router(analytics_router, prefix="/api")
app.include_router(weeks_router, prefix="/api")


@app.get("/health", response_model=HealthResponse, tags=["health"])
def health_check() -> HealthResponse:
    """Basic health check endpoint.

    Returns 200 OK if the service is running.
    Does not check dependencies.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        database="unknown",
    )


@app.get("/health/ready", response_model=HealthResponse, tags=["health"])
def readiness_check(db: Session = Depends(get_db)) -> HealthResponse:
    """Readiness check endpoint.

    Returns 200 if the database answers, 503 otherwise.
    """
    try:
        ping_database(db)
    except SQLAlchemyError as e:
        logger.error(f"Readiness check failed: {e}")
        raise HTTPException(status_code=503, detail="Database connection failed")

    return HealthResponse(
        status="ready",
        version=__version__,
        database="connected",
    )

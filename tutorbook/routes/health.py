# tutorbook/routes/health.py
"""
Health check endpoint.

Used by load balancers and uptime checks; reports database connectivity
without failing the request when the database is down.
"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import __version__
from ..api.dependencies.database import get_db
from ..schemas.base_responses import HealthResponse

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health_check(response: Response, db: Session = Depends(get_db)) -> HealthResponse:
    """
    Basic health check endpoint.

    Returns:
        ``ok`` when the database answers, ``degraded`` otherwise.
    """
    response.headers["Cache-Control"] = "no-store"
    try:
        db.execute(text("SELECT 1"))
        db_status = "connected"
        status = "ok"
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        db_status = "unavailable"
        status = "degraded"

    return HealthResponse(status=status, database=db_status, version=__version__)

"""
Health check and status endpoints.
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from checkin.core import settings
from checkin.core.datetime_utils import utc_now
from checkin.models import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint.
    Returns basic health status of the API and whether the database answers.
    """
    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except Exception as e:
        logger.warning(f"Health check database probe failed: {e}")
        database = "unavailable"
    return {
        "status": "healthy" if database == "ok" else "degraded",
        "database": database,
        "timestamp": utc_now().isoformat(),
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


@router.get("/ping")
def ping():
    """
    Simple ping endpoint for basic connectivity testing.
    """
    return {"message": "pong"}

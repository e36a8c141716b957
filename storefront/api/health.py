"""
Status and health check endpoints
"""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy import text
from datetime import datetime, timezone

from storefront import __version__
from storefront.database import get_db
from storefront.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint
    
    Returns service health status including:
    - Service status
    - Database connectivity
    - Timestamp
    """
    # Check database connection
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError as e:
        logger.warning("Database health check failed: %s", e)
        db_status = "unhealthy"
    
    return {
        "service": settings.SERVICE_NAME,
        "status": "ok" if db_status == "healthy" else "degraded",
        "database": db_status,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("")
def root():
    """API status endpoint"""
    return {
        "status": "running",
        "message": "Water Blob Store API",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__
    }

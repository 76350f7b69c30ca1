"""
Health check endpoint for deployment monitoring.
"""
import logging
from fastapi import APIRouter
from datetime import datetime
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.db.session import SessionLocal
from app.llm.router import is_model_available

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
def health_check():
    """
    Health check endpoint for deployment monitoring.

    Returns 200 with "degraded" status when the database is unreachable.
    """
    status = "healthy"

    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        db_status = "connected"
    except SQLAlchemyError as e:
        logger.error(f"Health check database error: {e}")
        db_status = "error"
        status = "degraded"
    finally:
        db.close()

    return {
        "status": status,
        "timestamp": datetime.utcnow().isoformat(),
        "database": db_status,
        "ai": "configured" if is_model_available() else "not_configured",
        "version": "1.0.0",
    }

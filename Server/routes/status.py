"""
OilDesk Server - Status Endpoints

This module contains the health check endpoint. The database is probed so
monitoring can tell a running server with an unreachable store apart from
a healthy one.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()


def _DatabaseReachable() -> bool:
    from database import db_manager

    if db_manager is None:
        return False

    session = db_manager.GetSession()
    try:
        session.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(f"Health check could not reach the database: {str(e)}")
        return False
    finally:
        session.close()


# ==================== Health Check Endpoint ====================

@router.get("/health", tags=["Status"])
async def health_check():
    """
    Health check endpoint to verify server and database are up

    Returns:
        dict: Server status information; 503 when the database is unreachable
    """
    database_ok = _DatabaseReachable()

    body = {
        "status": "healthy" if database_ok else "degraded",
        "service": "OilDesk Server",
        "version": "1.0.0",
        "database": "ok" if database_ok else "unavailable",
        "timestamp_utc": datetime.now(timezone.utc).isoformat()
    }

    return JSONResponse(status_code=200 if database_ok else 503, content=body)

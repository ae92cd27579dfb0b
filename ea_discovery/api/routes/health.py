import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ea_discovery.db import DatabaseNotReady, engagement_db

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check():
    """Liveness check; never touches the database."""
    return {"status": "healthy", "service": "ea-discovery-assistant"}


@router.get("/ready")
async def readiness_check():
    """Readiness check - verifies the engagement database answers."""
    checks = {"database": False}

    try:
        async with engagement_db.sessions()() as session:
            await session.execute(text("SELECT 1"))
        checks["database"] = True
    except (DatabaseNotReady, SQLAlchemyError) as e:
        logger.error("readiness_database_failed", error=str(e))

    all_healthy = all(checks.values())
    return JSONResponse(
        status_code=200 if all_healthy else 503,
        content={"status": "ready" if all_healthy else "degraded", "checks": checks},
    )

"""
Health Check Endpoints

- /health        - Liveness (process is up)
- /health/ready  - Readiness (database reachable and schema created)
"""

from fastapi import APIRouter, HTTPException, status
from datetime import datetime
from typing import Dict, Any
import time

from app.core.config import settings
from app.core.database import ping_database
from app.core.logging_config import logger


router = APIRouter(prefix="/health", tags=["Health Checks"])


async def check_database() -> Dict[str, Any]:
    start = time.time()
    try:
        tables_ready = await ping_database()
    except Exception as e:
        logger.error(f"[HealthCheck] Database check failed: {e}")
        return {
            "status": "unhealthy",
            "latency_ms": round((time.time() - start) * 1000, 2),
            "error": str(e)[:200],
        }

    return {
        "status": "healthy",
        "latency_ms": round((time.time() - start) * 1000, 2),
        "tables_ready": tables_ready,
    }


@router.get("")
async def liveness_check():
    return {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "app": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
    }


@router.get("/ready")
async def readiness_check():
    """200 only when the database can serve portal requests, 503 otherwise"""
    db_check = await check_database()
    is_ready = db_check["status"] == "healthy" and db_check.get("tables_ready", False)

    response = {
        "status": "ready" if is_ready else "not_ready",
        "timestamp": datetime.utcnow().isoformat(),
        "checks": {"database": db_check},
    }

    if not is_ready:
        logger.warning(f"[HealthCheck] Readiness check failed: {response}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=response
        )

    return response

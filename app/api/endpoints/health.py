"""
Health check and monitoring endpoints.

Provides liveness, database connectivity and basic row counts.
"""

import logging
from typing import Dict, Any
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from datetime import datetime, timezone

from app.core.database import get_db, run_query

router = APIRouter(tags=["Health"])
logger = logging.getLogger(__name__)


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, str]:
    """
    Basic health check endpoint.

    Returns 200 OK if the service is running.
    Use this for simple uptime monitoring and load balancer health checks.
    """
    return {
        "status": "healthy",
        "timestamp": _utc_timestamp()
    }


@router.get("/health/detailed", status_code=status.HTTP_200_OK)
def detailed_health_check(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Detailed health check with dependency status.

    Checks database connectivity with a trivial query. The endpoint itself
    always answers 200; inspect `status` for the overall result.
    """
    health_status = {
        "status": "healthy",
        "timestamp": _utc_timestamp(),
        "checks": {}
    }

    try:
        run_query(db, "SELECT 1")
        health_status["checks"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful"
        }
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        health_status["status"] = "unhealthy"
        health_status["checks"]["database"] = {
            "status": "unhealthy",
            "message": f"Database error: {str(e)}"
        }

    return health_status


@router.get("/metrics", status_code=status.HTTP_200_OK)
def get_metrics(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Application metrics endpoint.

    Returns row counts for jobs and companies.
    """
    jobs = run_query(db, "SELECT COUNT(*) AS total FROM jobs")[0]["total"]
    companies = run_query(db, "SELECT COUNT(*) AS total FROM companies")[0]["total"]

    return {
        "timestamp": _utc_timestamp(),
        "metrics": {
            "total_jobs": jobs,
            "total_companies": companies,
        }
    }

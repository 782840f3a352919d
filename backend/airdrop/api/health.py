from fastapi import APIRouter
from datetime import datetime, timezone

from tortoise import connections

from airdrop.services.airdrop import airdrop_service

router = APIRouter(tags=["health"])


@router.get("/health", summary="Health check")
async def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/ready", summary="Readiness check")
async def readiness_check():
    """
    Readiness check - verifies all dependencies are available.

    Checks the airdrop configuration and the claim-record database.
    """
    checks = {"airdrop_config": airdrop_service.is_configured()}

    try:
        await connections.get("default").execute_query("SELECT 1")
        checks["database"] = True
    except Exception:
        checks["database"] = False

    all_healthy = all(checks.values())

    return {
        "status": "ready" if all_healthy else "degraded",
        "checks": checks,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

import time
from datetime import datetime, timezone

from fastapi import APIRouter

from db.db import ping_db

SERVICE_NAME = "MarketZone Messaging API"
SERVICE_VERSION = "1.0.0"

router = APIRouter()
started_at = time.monotonic()

@router.get("/health")
async def health():
    """Liveness check; never touches the database"""
    return {
        "status": "alive",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - started_at, 3),
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
    }

@router.get("/api/health")
async def api_health():
    """Readiness check including database reachability"""
    connected = await ping_db()
    return {
        "status": "alive" if connected else "degraded",
        "database": "connected" if connected else "disconnected",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

"""Service health route."""

import time
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from loguru import logger

from uiregistry.api.dependencies import get_registry_service
from uiregistry.services.registry_service import RegistryService

router = APIRouter(tags=["health"])

_started_at = time.monotonic()


@router.get("/health")
async def health(service: RegistryService = Depends(get_registry_service)):
    """Report liveness, uptime and whether the store answers."""
    try:
        connected = await service.db.ping()
    except Exception as e:
        logger.warning(f"Health check could not reach the database: {e}")
        connected = False

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - _started_at, 3),
        "database": "connected" if connected else "disconnected",
    }

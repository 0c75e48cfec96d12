# backend/integrity/router/health.py
from __future__ import annotations
import logging
import time
from fastapi import APIRouter, Depends, HTTPException, Request, status

from integrity.container import AppContainer
from integrity.core.exceptions import ServiceUnavailable
from integrity.core.services.health import probe_detection
from integrity.router.deps import get_container

router = APIRouter(tags=["health"])
logger = logging.getLogger("integrity.router.health")


@router.get("/health")
async def health_check(request: Request):
    """Basic health check - this API is running"""
    state = request.app.state.status.get_status()
    return {"status": "ok", "uptime_seconds": time.time() - state["startup_time"]}


@router.get("/health/detection")
async def detection_health(request: Request, container: AppContainer = Depends(get_container)):
    """Probe the detection service. 503 while it is offline; clients retry on demand."""
    app_status = request.app.state.status
    try:
        info = await probe_detection(container.detection)
    except ServiceUnavailable as e:
        app_status.set_detection_offline(str(e))
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    app_status.set_detection_online(info)
    return {"status": "online", "detection": info}

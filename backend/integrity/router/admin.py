# backend/integrity/router/admin.py
from __future__ import annotations
import logging
from fastapi import APIRouter, Depends, HTTPException, status

from integrity.container import AppContainer
from integrity.core.exceptions import DetectionServiceError
from integrity.router.deps import get_container

router = APIRouter(prefix="/admin", tags=["admin"])
logger = logging.getLogger("integrity.router.admin")


@router.get("/stats")
async def detection_stats(container: AppContainer = Depends(get_container)):
    """Database statistics of the detection service (passthrough)."""
    try:
        return await container.detection.get_stats()
    except DetectionServiceError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.post("/rebuild-index")
async def rebuild_index(container: AppContainer = Depends(get_container)):
    """Ask the detection service to rebuild its search index (passthrough)."""
    try:
        result = await container.detection.rebuild_index()
    except DetectionServiceError as e:
        logger.error(f"❌ Index rebuild failed: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    logger.info(f"🔄 Index rebuild requested: {result}")
    return result

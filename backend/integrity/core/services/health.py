from __future__ import annotations
import logging

from integrity.core.exceptions import DetectionServiceError, ServiceUnavailable
from integrity.core.ports.detection import IDetectionService

logger = logging.getLogger("integrity.health")


async def probe_detection(detection: IDetectionService) -> dict:
    """Health of the remote detection service; raises ServiceUnavailable. Never retried."""
    try:
        info = await detection.check_health()
    except DetectionServiceError as e:
        raise ServiceUnavailable(f"Detection service unavailable: {e}", original_error=e) from e
    if not info.get("model_loaded") or not info.get("index_ready"):
        logger.warning(f"⚠️ Detection service reachable but not ready: {info}")
    return info

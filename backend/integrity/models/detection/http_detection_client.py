# backend/integrity/models/detection/http_detection_client.py
from __future__ import annotations
from typing import Optional, Type, TypeVar
import logging

import httpx
from pydantic import BaseModel, ValidationError

from integrity.core.entities import CheckOutcome, ExtractedText
from integrity.core.exceptions import DetectionServiceError
from integrity.core.ports.detection import IDetectionService
from integrity.models.schemas import CheckResponse, DetectionHealth, UploadResponse

logger = logging.getLogger("integrity.detection")

M = TypeVar("M", bound=BaseModel)


def _error_detail(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("error")
        if isinstance(detail, str) and detail.strip():
            return detail
    return None


class HttpDetectionClient(IDetectionService):
    """
    JSON client for the remote detection service.
    No retries and, unless a timeout is configured, no local deadline.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    # ----------------------------------------------------------
    # Plumbing
    # ----------------------------------------------------------
    async def _request(self, method: str, path: str, default_error: str, **kwargs) -> dict:
        try:
            r = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"⚠️ {method} {path} failed: {e}")
            raise DetectionServiceError(default_error, original_error=e) from e

        if r.is_error:
            detail = _error_detail(r) or default_error
            logger.warning(f"⚠️ {method} {path} -> {r.status_code}: {detail}")
            raise DetectionServiceError(detail, status_code=r.status_code)

        try:
            data = r.json()
        except ValueError as e:
            raise DetectionServiceError(f"Malformed response from {path}", status_code=r.status_code, original_error=e) from e
        if not isinstance(data, dict):
            raise DetectionServiceError(f"Malformed response from {path}", status_code=r.status_code)
        return data

    @staticmethod
    def _parse(model: Type[M], data: dict, path: str) -> M:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.warning(f"⚠️ Unexpected payload from {path}: {e.error_count()} validation error(s)")
            raise DetectionServiceError(f"Malformed response from {path}", original_error=e) from e

    # ----------------------------------------------------------
    # Public API
    # ----------------------------------------------------------
    async def check_health(self) -> dict:
        data = await self._request("GET", "/health", "Backend service unavailable")
        return self._parse(DetectionHealth, data, "/health").model_dump()

    async def upload_file(self, filename: str, content: bytes, content_type: str | None = None) -> ExtractedText:
        files = {"file": (filename, content, content_type or "application/octet-stream")}
        data = await self._request("POST", "/api/upload", "File upload failed", files=files)
        return self._parse(UploadResponse, data, "/api/upload").to_entity()

    async def submit_text(self, text: str) -> ExtractedText:
        data = await self._request("POST", "/api/paste", "Text submission failed", json={"text": text})
        return self._parse(UploadResponse, data, "/api/paste").to_entity()

    async def check(
        self,
        text: str,
        filename: str | None,
        threshold_high: float = 0.85,
        threshold_medium: float = 0.7,
    ) -> CheckOutcome:
        payload = {
            "text": text,
            "filename": filename,
            "threshold_high": threshold_high,
            "threshold_medium": threshold_medium,
        }
        data = await self._request("POST", "/api/check", "Plagiarism check failed", json=payload)
        outcome = self._parse(CheckResponse, data, "/api/check").to_entity()
        if outcome.result is not None:
            logger.info(
                f"🔍 Check done | file={filename} | overall={outcome.result.overall_score:.1f} "
                f"| matches={len(outcome.result.matches)}"
            )
        return outcome

    async def get_stats(self) -> dict:
        return await self._request("GET", "/api/stats", "Failed to fetch stats")

    async def rebuild_index(self) -> dict:
        return await self._request("POST", "/api/rebuild-index", "Failed to rebuild index")

    async def aclose(self) -> None:
        await self._client.aclose()

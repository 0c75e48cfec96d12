from __future__ import annotations
from abc import ABC, abstractmethod
from integrity.core.entities import CheckOutcome, ExtractedText

class IDetectionService(ABC):
    @abstractmethod
    async def check_health(self) -> dict: ...

    @abstractmethod
    async def upload_file(self, filename: str, content: bytes, content_type: str | None = None) -> ExtractedText: ...

    @abstractmethod
    async def submit_text(self, text: str) -> ExtractedText: ...

    @abstractmethod
    async def check(
        self,
        text: str,
        filename: str | None,
        threshold_high: float,
        threshold_medium: float,
    ) -> CheckOutcome:
        ...

    @abstractmethod
    async def get_stats(self) -> dict: ...

    @abstractmethod
    async def rebuild_index(self) -> dict: ...

    async def aclose(self) -> None:
        return None

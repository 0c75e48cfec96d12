from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from integrity.core.entities import AnalysisRecord, AnalysisStatus, RiskLevel
from integrity.core.services.chunk_matching import (
    DEFAULT_HIGHLIGHT_THRESHOLD,
    ChunkHighlight,
    build_chunk_highlights,
)
from integrity.core.services.risk import DEFAULT_THRESHOLDS, RiskThresholds, classify_risk, round_score
from integrity.core.services.source_registry import SourceEntry, SourceRegistry


@dataclass(frozen=True)
class DocumentReport:
    id: str
    filename: str
    status: AnalysisStatus
    timestamp: datetime
    overall_score: float
    originality: int
    ai_score: int
    risk: RiskLevel
    high_risk_count: int
    medium_risk_count: int
    low_risk_count: int
    processing_time: float
    chunks: List[ChunkHighlight] = field(default_factory=list)
    sources: List[SourceEntry] = field(default_factory=list)
    preview: Optional[str] = None


class ReportService:
    """Builds the single-document view: highlights, source list and risk bucket."""

    def __init__(
        self,
        highlight_threshold: float = DEFAULT_HIGHLIGHT_THRESHOLD,
        thresholds: RiskThresholds = DEFAULT_THRESHOLDS,
        preview_length: int = 2000,
    ):
        self.highlight_threshold = highlight_threshold
        self.thresholds = thresholds
        self.preview_length = preview_length

    def sources(self, record: AnalysisRecord) -> SourceRegistry:
        return SourceRegistry.from_matches(record.matches)

    def _preview(self, text: str) -> str:
        if len(text) > self.preview_length:
            return text[: self.preview_length] + "..."
        return text

    def build(self, record: AnalysisRecord) -> Optional[DocumentReport]:
        """None when the record has nothing to show (no detection result)."""
        result = record.result
        if result is None:
            return None

        registry = self.sources(record)
        chunks = build_chunk_highlights(result.chunks, record.matches, registry, self.highlight_threshold)
        return DocumentReport(
            id=record.id,
            filename=record.filename,
            status=record.status,
            timestamp=record.timestamp,
            overall_score=result.overall_score,
            originality=round_score(result.originality),
            ai_score=round_score(result.ai_score),
            risk=classify_risk(result.originality, self.thresholds),
            high_risk_count=result.high_risk_count,
            medium_risk_count=result.medium_risk_count,
            low_risk_count=result.low_risk_count,
            processing_time=result.processing_time,
            chunks=chunks,
            sources=registry.entries,
            preview=None if result.chunks else self._preview(record.text),
        )

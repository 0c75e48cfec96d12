from __future__ import annotations
from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from integrity.core.entities import (
    AnalysisStatus,
    CheckOutcome,
    DocumentResult,
    ExtractedText,
    Match,
    MatchType,
    RiskLevel,
    TextChunk,
)

# ============================================================
# Detection service wire format
# ============================================================

class TextChunkModel(BaseModel):
    chunk_id: int
    text: str
    start_pos: int = 0
    end_pos: int = 0

    def to_entity(self) -> TextChunk:
        return TextChunk(chunk_id=self.chunk_id, text=self.text, start_pos=self.start_pos, end_pos=self.end_pos)


class MatchModel(BaseModel):
    chunk_id: int
    source_id: str
    similarity_score: float = Field(..., ge=0.0, le=1.0)
    source_text: str = ""
    match_type: MatchType

    def to_entity(self) -> Match:
        return Match(
            chunk_id=self.chunk_id,
            source_id=self.source_id,
            similarity_score=self.similarity_score,
            source_text=self.source_text,
            match_type=self.match_type,
        )


class DocumentResultModel(BaseModel):
    overall_score: float = Field(..., ge=0.0, le=100.0)
    # Optional on the wire; to_entity() is the only place defaults are applied.
    ai_score: Optional[float] = Field(None, ge=0.0, le=100.0)
    chunks: List[TextChunkModel] = Field(default_factory=list)
    matches: List[MatchModel] = Field(default_factory=list)
    high_risk_count: Optional[int] = None
    medium_risk_count: Optional[int] = None
    low_risk_count: Optional[int] = None
    processing_time: Optional[float] = None
    timestamp: Optional[str] = None

    def to_entity(self) -> DocumentResult:
        return DocumentResult(
            overall_score=self.overall_score,
            ai_score=self.ai_score or 0.0,
            chunks=[c.to_entity() for c in self.chunks],
            matches=[m.to_entity() for m in self.matches],
            high_risk_count=self.high_risk_count or 0,
            medium_risk_count=self.medium_risk_count or 0,
            low_risk_count=self.low_risk_count or 0,
            processing_time=self.processing_time or 0.0,
            timestamp=self.timestamp or "",
        )


class UploadResponse(BaseModel):
    success: bool
    filename: Optional[str] = None
    content_type: Optional[str] = None
    size: int = 0
    text: str = ""
    character_count: int = 0
    word_count: int = 0

    def to_entity(self) -> ExtractedText:
        return ExtractedText(
            filename=self.filename or "",
            text=self.text,
            success=self.success,
            content_type=self.content_type or "text/plain",
            size=self.size,
            character_count=self.character_count,
            word_count=self.word_count,
        )


class CheckStats(BaseModel):
    total_chunks: int = 0
    total_matches: int = 0
    database_size: int = 0


class ChunkHighlightPayload(BaseModel):
    text: str
    matches: List[MatchModel] = Field(default_factory=list)


class CheckResponse(BaseModel):
    success: bool
    result: Optional[DocumentResultModel] = None
    error: Optional[str] = None
    highlights: Optional[Dict[int, ChunkHighlightPayload]] = None
    stats: Optional[CheckStats] = None

    def to_entity(self) -> CheckOutcome:
        return CheckOutcome(
            success=self.success,
            result=self.result.to_entity() if self.result else None,
            error=self.error,
        )


class DetectionHealth(BaseModel):
    status: str
    model_loaded: bool = False
    index_ready: bool = False
    version: str = "unknown"


# ============================================================
# API request / response models
# ============================================================

class PasteRequest(BaseModel):
    text: str = Field(..., description="Text to analyze")


class SessionCreated(BaseModel):
    session_id: str
    created_at: datetime


class PipelineStatus(BaseModel):
    state: str
    progress: int
    last_error: Optional[str] = None


class ChunkHighlightOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    chunk_id: int
    text: str
    start_pos: int
    end_pos: int
    matched: bool
    match_type: Optional[MatchType] = None
    similarity_score: Optional[float] = None
    source_display_id: Optional[int] = None
    match_count: int = 0


class SourceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    display_id: int
    source_id: str
    chunk_id: int
    similarity_score: float
    source_text: str
    match_type: MatchType


class DocumentReportOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

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
    chunks: List[ChunkHighlightOut]
    sources: List[SourceOut]
    preview: Optional[str] = None


class HistoryRowOut(BaseModel):
    id: str
    filename: str
    timestamp: datetime
    status: AnalysisStatus
    originality: Optional[int] = None
    error: Optional[str] = None


class TrendPointOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    label: str
    value: int


class AnalyticsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_reports: int
    completed_reports: int
    avg_originality: int
    avg_ai_score: int
    avg_human_score: int
    low_risk_count: int
    medium_risk_count: int
    high_risk_count: int
    exact_matches: int
    paraphrase_matches: int
    semantic_matches: int
    originality_trend: List[TrendPointOut]
    ai_score_trend: List[TrendPointOut]


class RecentReportOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    filename: str
    timestamp: datetime
    status: AnalysisStatus
    originality: int


class DashboardOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_submissions: int
    avg_originality: int
    flags_review: int
    recent: List[RecentReportOut]


class SubmissionOut(BaseModel):
    id: str
    filename: str
    status: AnalysisStatus
    report: Optional[DocumentReportOut] = None

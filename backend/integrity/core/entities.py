from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class MatchType(str, Enum):
    EXACT = "exact"
    PARAPHRASE = "paraphrase"
    SEMANTIC = "semantic"


class AnalysisStatus(str, Enum):
    PENDING = "pending"
    ANALYZING = "analyzing"
    COMPLETED = "completed"
    ERROR = "error"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class TextChunk:
    chunk_id: int
    text: str
    start_pos: int
    end_pos: int


@dataclass(frozen=True)
class Match:
    chunk_id: int
    source_id: str
    similarity_score: float  # 0–1
    source_text: str
    match_type: MatchType


@dataclass(frozen=True)
class DocumentResult:
    overall_score: float  # 0–100, similarity exposure
    ai_score: float  # 0–100
    chunks: List[TextChunk]
    matches: List[Match]
    high_risk_count: int = 0
    medium_risk_count: int = 0
    low_risk_count: int = 0
    processing_time: float = 0.0
    timestamp: str = ""

    @property
    def originality(self) -> float:
        return 100.0 - self.overall_score


@dataclass(frozen=True)
class ExtractedText:
    """Normalized text returned by the upload / paste endpoints."""
    filename: str
    text: str
    success: bool = True
    content_type: str = "text/plain"
    size: int = 0
    character_count: int = 0
    word_count: int = 0


@dataclass(frozen=True)
class CheckOutcome:
    success: bool
    result: Optional[DocumentResult]
    error: Optional[str] = None


@dataclass
class AnalysisRecord:
    """One submission as seen by the session. Mutated by the pipeline only."""
    id: str
    filename: str
    text: str
    result: Optional[DocumentResult] = None
    matches: List[Match] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)
    status: AnalysisStatus = AnalysisStatus.PENDING
    error: Optional[str] = None

    @property
    def originality(self) -> Optional[float]:
        return self.result.originality if self.result else None

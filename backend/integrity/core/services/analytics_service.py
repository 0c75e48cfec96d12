from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Sequence
import logging
import statistics

from integrity.core.entities import AnalysisRecord, AnalysisStatus, MatchType, RiskLevel
from integrity.core.services.risk import DEFAULT_THRESHOLDS, RiskThresholds, classify_risk, round_score

logger = logging.getLogger("integrity.analytics")

RECENT_DASHBOARD_ROWS = 5


@dataclass(frozen=True)
class TrendPoint:
    label: str
    value: int


@dataclass(frozen=True)
class PortfolioAnalytics:
    total_reports: int = 0
    completed_reports: int = 0
    avg_originality: int = 0
    avg_ai_score: int = 0
    avg_human_score: int = 0
    low_risk_count: int = 0
    medium_risk_count: int = 0
    high_risk_count: int = 0
    exact_matches: int = 0
    paraphrase_matches: int = 0
    semantic_matches: int = 0
    originality_trend: List[TrendPoint] = field(default_factory=list)
    ai_score_trend: List[TrendPoint] = field(default_factory=list)


@dataclass(frozen=True)
class RecentReport:
    id: str
    filename: str
    timestamp: datetime
    status: AnalysisStatus
    originality: int


@dataclass(frozen=True)
class DashboardSummary:
    total_submissions: int = 0
    avg_originality: int = 0
    flags_review: int = 0
    recent: List[RecentReport] = field(default_factory=list)


def completed_records(history: Sequence[AnalysisRecord]) -> List[AnalysisRecord]:
    return [r for r in history if r.status == AnalysisStatus.COMPLETED and r.result is not None]


def _originality(r: AnalysisRecord) -> float:
    return r.result.originality


def _ai_score(r: AnalysisRecord) -> float:
    return r.result.ai_score


def _rounded_mean(values: List[float]) -> int:
    if not values:
        return 0
    return round_score(statistics.fmean(values))


class AnalyticsService:
    """
    Portfolio statistics over a session history. Everything is recomputed on
    read; `current` is ignored unless it was also archived.
    """

    def __init__(
        self,
        thresholds: RiskThresholds = DEFAULT_THRESHOLDS,
        trend_window: int = 7,
        label_length: int = 8,
        flag_threshold: float = 70.0,
    ):
        self.thresholds = thresholds
        self.trend_window = trend_window
        self.label_length = label_length
        self.flag_threshold = flag_threshold

    def trend(self, completed: Sequence[AnalysisRecord], value_of: Callable[[AnalysisRecord], float]) -> List[TrendPoint]:
        """Last `trend_window` completed reports, oldest first."""
        window = list(completed[: self.trend_window])
        window.reverse()
        return [
            TrendPoint(label=r.filename[: self.label_length], value=round_score(value_of(r)))
            for r in window
        ]

    def portfolio(self, history: Sequence[AnalysisRecord]) -> PortfolioAnalytics:
        completed = completed_records(history)
        if not completed:
            return PortfolioAnalytics(total_reports=len(history))

        avg_ai = _rounded_mean([_ai_score(r) for r in completed])
        risks = Counter(classify_risk(_originality(r), self.thresholds) for r in completed)
        types = Counter(m.match_type for r in completed for m in r.matches)

        analytics = PortfolioAnalytics(
            total_reports=len(history),
            completed_reports=len(completed),
            avg_originality=_rounded_mean([_originality(r) for r in completed]),
            avg_ai_score=avg_ai,
            avg_human_score=100 - avg_ai,
            low_risk_count=risks[RiskLevel.LOW],
            medium_risk_count=risks[RiskLevel.MEDIUM],
            high_risk_count=risks[RiskLevel.HIGH],
            exact_matches=types[MatchType.EXACT],
            paraphrase_matches=types[MatchType.PARAPHRASE],
            semantic_matches=types[MatchType.SEMANTIC],
            originality_trend=self.trend(completed, _originality),
            ai_score_trend=self.trend(completed, _ai_score),
        )
        logger.debug(
            f"📊 Analytics over {len(completed)}/{len(history)} records | "
            f"avg originality={analytics.avg_originality} | avg AI={analytics.avg_ai_score}"
        )
        return analytics

    def dashboard(self, history: Sequence[AnalysisRecord]) -> DashboardSummary:
        completed = completed_records(history)
        flagged = sum(1 for r in completed if _originality(r) < self.flag_threshold)
        recent = [
            RecentReport(
                id=r.id,
                filename=r.filename,
                timestamp=r.timestamp,
                status=r.status,
                originality=round_score(r.result.originality) if r.result else 0,
            )
            for r in history[:RECENT_DASHBOARD_ROWS]
        ]
        return DashboardSummary(
            total_submissions=len(history),
            avg_originality=_rounded_mean([_originality(r) for r in completed]),
            flags_review=flagged,
            recent=recent,
        )

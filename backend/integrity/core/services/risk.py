from __future__ import annotations
from dataclasses import dataclass
import math

from integrity.core.entities import RiskLevel


@dataclass(frozen=True)
class RiskThresholds:
    low: float = 80.0
    medium: float = 50.0


DEFAULT_THRESHOLDS = RiskThresholds()


def classify_risk(originality: float, thresholds: RiskThresholds = DEFAULT_THRESHOLDS) -> RiskLevel:
    """
    Map an originality score (0–100) to a risk bucket.
    A boundary value belongs to the safer bucket: exactly `low` is LOW,
    exactly `medium` is MEDIUM.
    """
    if originality >= thresholds.low:
        return RiskLevel.LOW
    if originality >= thresholds.medium:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


def round_score(value: float) -> int:
    """Round half up (2.5 -> 3), the way scores are displayed on the dashboard."""
    return int(math.floor(value + 0.5))

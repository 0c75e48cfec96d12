from __future__ import annotations
import logging
from dataclasses import dataclass

from integrity.config import Settings
from integrity.core.ports.detection import IDetectionService
from integrity.core.services.analytics_service import AnalyticsService
from integrity.core.services.report_service import ReportService
from integrity.core.services.risk import RiskThresholds
from integrity.core.services.submission_pipeline import SubmissionPipeline
from integrity.core.session import SessionContext, SessionRegistry
from integrity.models.detection.http_detection_client import HttpDetectionClient
from integrity.models.store.inmemory_history import InMemoryHistoryStore

logger = logging.getLogger("integrity.container")


@dataclass
class AppContainer:
    settings: Settings
    detection: IDetectionService
    sessions: SessionRegistry
    reports: ReportService
    analytics: AnalyticsService


def build_container(settings: Settings, detection: IDetectionService | None = None) -> AppContainer:
    """
    Wire the engine services from settings. `detection` can be injected
    (tests, alternative transports); otherwise the HTTP client is used.
    """
    if detection is None:
        detection = HttpDetectionClient(settings.detection_api_url, timeout=settings.detection_timeout)
        logger.info(f"🔌 Using detection service at {settings.detection_api_url}")

    thresholds = RiskThresholds(low=settings.risk_low_threshold, medium=settings.risk_medium_threshold)

    def new_session(session_id: str) -> SessionContext:
        history = InMemoryHistoryStore(capacity=settings.history_capacity)
        pipeline = SubmissionPipeline(
            detection=detection,
            history=history,
            threshold_high=settings.check_threshold_high,
            threshold_medium=settings.check_threshold_medium,
            min_text_length=settings.min_text_length,
        )
        return SessionContext(session_id=session_id, history=history, pipeline=pipeline)

    reports = ReportService(
        highlight_threshold=settings.highlight_threshold,
        thresholds=thresholds,
        preview_length=settings.preview_length,
    )
    analytics = AnalyticsService(
        thresholds=thresholds,
        trend_window=settings.trend_window,
        label_length=settings.trend_label_length,
        flag_threshold=settings.flag_review_threshold,
    )

    logger.info("✅ Container built")
    return AppContainer(
        settings=settings,
        detection=detection,
        sessions=SessionRegistry(new_session),
        reports=reports,
        analytics=analytics,
    )

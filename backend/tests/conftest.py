"""
Pytest configuration and fixtures for the integrity dashboard tests.
"""

import pytest
from datetime import datetime, timedelta

from integrity.core.entities import (
    AnalysisRecord,
    AnalysisStatus,
    CheckOutcome,
    DocumentResult,
    ExtractedText,
    Match,
    MatchType,
    TextChunk,
)
from integrity.core.exceptions import DetectionServiceError
from integrity.core.ports.detection import IDetectionService


class FakeDetectionService(IDetectionService):
    """In-process stand-in for the remote detection service."""

    def __init__(self, result=None, check_success=True, check_error=None):
        self.result = result
        self.check_success = check_success
        self.check_error = check_error
        self.extract_success = True
        self.fail_on = set()  # "upload", "paste", "check", "health"
        self.calls = []

    async def check_health(self):
        self.calls.append(("health",))
        if "health" in self.fail_on:
            raise DetectionServiceError("Backend service unavailable")
        return {"status": "healthy", "model_loaded": True, "index_ready": True, "version": "test"}

    async def upload_file(self, filename, content, content_type=None):
        self.calls.append(("upload", filename))
        if "upload" in self.fail_on:
            raise DetectionServiceError("File upload failed", status_code=500)
        text = content.decode("utf-8", errors="ignore")
        return ExtractedText(filename=filename, text=text, success=self.extract_success, size=len(content))

    async def submit_text(self, text):
        self.calls.append(("paste", text))
        if "paste" in self.fail_on:
            raise DetectionServiceError("Text submission failed", status_code=500)
        return ExtractedText(filename="pasted_text.txt", text=text.strip(), success=self.extract_success)

    async def check(self, text, filename, threshold_high=0.85, threshold_medium=0.7):
        self.calls.append(("check", text, filename, threshold_high, threshold_medium))
        if "check" in self.fail_on:
            raise DetectionServiceError("Plagiarism check failed", status_code=500)
        return CheckOutcome(success=self.check_success, result=self.result, error=self.check_error)

    async def get_stats(self):
        return {"success": True, "stats": {"total_documents": 3, "index_size": 12}}

    async def rebuild_index(self):
        return {"success": True, "message": "Index rebuilt"}


@pytest.fixture
def make_match():
    def _make(chunk_id=0, source_id="src-1", score=0.9, match_type=MatchType.EXACT, source_text="source passage"):
        return Match(
            chunk_id=chunk_id,
            source_id=source_id,
            similarity_score=score,
            source_text=source_text,
            match_type=match_type,
        )
    return _make


@pytest.fixture
def make_result():
    def _make(overall_score=20.0, ai_score=10.0, chunks=None, matches=None):
        if chunks is None:
            chunks = [
                TextChunk(chunk_id=0, text="First paragraph.", start_pos=0, end_pos=16),
                TextChunk(chunk_id=1, text="Second paragraph.", start_pos=17, end_pos=34),
            ]
        return DocumentResult(
            overall_score=overall_score,
            ai_score=ai_score,
            chunks=chunks,
            matches=matches or [],
        )
    return _make


@pytest.fixture
def make_record(make_result):
    counter = {"n": 0}
    base = datetime(2025, 1, 1, 12, 0, 0)

    def _make(record_id=None, filename="essay.docx", result=..., status=AnalysisStatus.COMPLETED, matches=None):
        counter["n"] += 1
        if result is ...:
            result = make_result()
        if matches is None:
            matches = list(result.matches) if result else []
        return AnalysisRecord(
            id=record_id or f"analysis_{counter['n']}",
            filename=filename,
            text="Some submitted text",
            result=result,
            matches=matches,
            timestamp=base + timedelta(minutes=counter["n"]),
            status=status,
        )
    return _make


@pytest.fixture
def fake_detection(make_result):
    return FakeDetectionService(result=make_result(overall_score=20.0, ai_score=10.0))

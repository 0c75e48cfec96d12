"""Tests for the single-document report view."""

from integrity.core.entities import MatchType, RiskLevel
from integrity.core.services.report_service import ReportService


def test_report_for_record(make_record, make_result, make_match):
    matches = [
        make_match(chunk_id=0, source_id="A", score=0.8, match_type=MatchType.EXACT),
        make_match(chunk_id=1, source_id="B", score=0.45),
        make_match(chunk_id=1, source_id="A", score=0.2),
    ]
    record = make_record(result=make_result(overall_score=35.4, ai_score=12.5, matches=matches))

    report = ReportService().build(record)

    assert report.originality == 65
    assert report.ai_score == 13
    assert report.risk == RiskLevel.MEDIUM
    assert [s.source_id for s in report.sources] == ["A", "B"]
    assert report.chunks[0].matched and report.chunks[0].source_display_id == 1
    assert not report.chunks[1].matched
    assert report.preview is None


def test_report_without_result_is_none(make_record):
    assert ReportService().build(make_record(result=None)) is None


def test_preview_when_no_chunks(make_record, make_result):
    record = make_record(result=make_result(chunks=[]))
    record.text = "x" * 2500

    report = ReportService(preview_length=2000).build(record)

    assert report.chunks == []
    assert report.preview == "x" * 2000 + "..."


def test_short_preview_is_not_ellipsized(make_record, make_result):
    record = make_record(result=make_result(chunks=[]))
    record.text = "short text"

    assert ReportService().build(record).preview == "short text"

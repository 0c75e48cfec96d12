from __future__ import annotations
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Response, status

from integrity.container import AppContainer
from integrity.core.services.risk import round_score
from integrity.core.session import SessionContext
from integrity.models.schemas import DocumentReportOut, HistoryRowOut, SourceOut
from integrity.router.deps import get_container, get_session

router = APIRouter(prefix="/sessions/{session_id}", tags=["reports"])

REPORT_NOT_FOUND = "Report not found"


@router.get("/reports", response_model=List[HistoryRowOut])
def list_reports(session: SessionContext = Depends(get_session)):
    return [
        HistoryRowOut(
            id=r.id,
            filename=r.filename,
            timestamp=r.timestamp,
            status=r.status,
            originality=round_score(r.originality) if r.originality is not None else None,
            error=r.error,
        )
        for r in session.history.history
    ]


@router.get("/reports/{report_id}", response_model=DocumentReportOut)
def get_report(
    report_id: str,
    session: SessionContext = Depends(get_session),
    container: AppContainer = Depends(get_container),
):
    record = session.history.get_by_id(report_id)
    report = container.reports.build(record) if record else None
    if report is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=REPORT_NOT_FOUND)
    return DocumentReportOut.model_validate(report)


@router.get("/reports/{report_id}/sources/{display_id}", response_model=SourceOut)
def get_source(
    report_id: str,
    display_id: int,
    session: SessionContext = Depends(get_session),
    container: AppContainer = Depends(get_container),
):
    record = session.history.get_by_id(report_id)
    if record is None or record.result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=REPORT_NOT_FOUND)
    entry = container.reports.sources(record).by_display_id(display_id)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Source {display_id} not found")
    return SourceOut.model_validate(entry)


@router.delete("/history", status_code=status.HTTP_204_NO_CONTENT)
def clear_history(session: SessionContext = Depends(get_session)):
    session.history.clear_history()
    return Response(status_code=status.HTTP_204_NO_CONTENT)

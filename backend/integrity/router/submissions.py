# backend/integrity/router/submissions.py
from __future__ import annotations
import logging
from typing import Awaitable
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from integrity.container import AppContainer
from integrity.core.entities import AnalysisRecord
from integrity.core.exceptions import (
    InvalidSubmission,
    PipelineBusy,
    PipelineCancelled,
    PipelineError,
)
from integrity.core.session import SessionContext
from integrity.models.schemas import DocumentReportOut, PasteRequest, PipelineStatus, SubmissionOut
from integrity.router.deps import get_container, get_session

router = APIRouter(prefix="/sessions/{session_id}", tags=["submissions"])
logger = logging.getLogger("integrity.router.submissions")


async def _run(run: Awaitable[AnalysisRecord], container: AppContainer) -> SubmissionOut:
    try:
        record = await run
    except InvalidSubmission as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except (PipelineBusy, PipelineCancelled) as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except PipelineError as e:
        # Extraction / check failures: nothing was archived, user may resubmit
        logger.warning(f"⚠️ Submission failed ({type(e).__name__}): {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    report = container.reports.build(record)
    return SubmissionOut(
        id=record.id,
        filename=record.filename,
        status=record.status,
        report=DocumentReportOut.model_validate(report) if report else None,
    )


@router.post("/submissions/text", response_model=SubmissionOut)
async def submit_text(
    payload: PasteRequest,
    session: SessionContext = Depends(get_session),
    container: AppContainer = Depends(get_container),
):
    return await _run(session.pipeline.submit_text(payload.text), container)


@router.post("/submissions/upload", response_model=SubmissionOut)
async def submit_upload(
    file: UploadFile = File(...),
    session: SessionContext = Depends(get_session),
    container: AppContainer = Depends(get_container),
):
    content = await file.read()
    return await _run(
        session.pipeline.submit_file(file.filename or "", content, file.content_type),
        container,
    )


@router.post("/submissions/cancel")
async def cancel_submission(session: SessionContext = Depends(get_session)):
    return {"cancelled": session.pipeline.cancel()}


@router.get("/pipeline", response_model=PipelineStatus)
def pipeline_status(session: SessionContext = Depends(get_session)):
    p = session.pipeline
    return PipelineStatus(state=p.state.value, progress=p.progress, last_error=p.last_error)

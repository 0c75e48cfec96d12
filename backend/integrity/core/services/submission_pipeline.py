from __future__ import annotations
from enum import Enum
from typing import Awaitable, Callable, Dict, FrozenSet, Optional, TypeVar
from uuid import uuid4
import asyncio
import logging

from integrity.core.entities import AnalysisRecord, AnalysisStatus, ExtractedText
from integrity.core.exceptions import (
    CheckFailure,
    DetectionServiceError,
    ExtractionFailure,
    InvalidPipelineTransition,
    InvalidSubmission,
    PipelineBusy,
    PipelineCancelled,
    PipelineError,
)
from integrity.core.ports.detection import IDetectionService
from integrity.core.ports.history import IHistoryStore

logger = logging.getLogger("integrity.pipeline")

T = TypeVar("T")

DEFAULT_FILENAME = "pasted_text.txt"
EMPTY_INPUT_MESSAGE = "Please provide a file or text to analyze"


class PipelineState(str, Enum):
    IDLE = "idle"
    EXTRACTING = "extracting"
    CHECKING = "checking"
    COMPLETED = "completed"
    ERROR = "error"


_ALLOWED: Dict[PipelineState, FrozenSet[PipelineState]] = {
    PipelineState.IDLE: frozenset({PipelineState.EXTRACTING}),
    PipelineState.EXTRACTING: frozenset({PipelineState.CHECKING, PipelineState.ERROR}),
    PipelineState.CHECKING: frozenset({PipelineState.COMPLETED, PipelineState.ERROR}),
    PipelineState.COMPLETED: frozenset({PipelineState.EXTRACTING}),
    PipelineState.ERROR: frozenset({PipelineState.IDLE}),
}

# Progress checkpoints (percent)
PROGRESS_START = 10
PROGRESS_TEXT_READY = 30
PROGRESS_CHECK_SUBMITTED = 50
PROGRESS_CHECK_COMPLETE = 80
PROGRESS_DONE = 100


class CancellationToken:
    """Cancels whatever network call a pipeline run is currently awaiting."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise PipelineCancelled("Submission was cancelled")

    async def guard(self, aw: Awaitable[T]) -> T:
        if self.cancelled:
            if asyncio.iscoroutine(aw):
                aw.close()
            self.raise_if_cancelled()
        task = asyncio.ensure_future(aw)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()
        if not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            raise PipelineCancelled("Submission was cancelled")
        return task.result()


def new_analysis_id() -> str:
    return f"analysis_{uuid4().hex}"


class SubmissionPipeline:
    """
    Upload/paste -> text extraction -> detection check, as a finite-state machine.

    A successful run sets the record as current and archives it. A failed or
    cancelled run leaves no trace in the history: the record ends in `error`,
    travels on the raised exception, and the machine returns to idle.
    """

    def __init__(
        self,
        detection: IDetectionService,
        history: IHistoryStore,
        threshold_high: float = 0.85,
        threshold_medium: float = 0.7,
        min_text_length: int = 10,
        id_factory: Callable[[], str] = new_analysis_id,
    ):
        self.detection = detection
        self.history = history
        self.threshold_high = threshold_high
        self.threshold_medium = threshold_medium
        self.min_text_length = min_text_length
        self.id_factory = id_factory

        self.state = PipelineState.IDLE
        self.progress = 0
        self.last_error: Optional[str] = None
        self._token: Optional[CancellationToken] = None

    # ------------------------------------------------------
    # State machine
    # ------------------------------------------------------
    def _transition(self, target: PipelineState, progress: Optional[int] = None) -> None:
        if target not in _ALLOWED[self.state]:
            raise InvalidPipelineTransition(self.state.value, target.value)
        logger.info(f"🔁 Pipeline {self.state.value} -> {target.value}")
        self.state = target
        if progress is not None:
            self.progress = max(self.progress, progress)

    @property
    def busy(self) -> bool:
        return self.state in (PipelineState.EXTRACTING, PipelineState.CHECKING)

    def cancel(self) -> bool:
        """Cancel the in-flight run, if any. Returns whether there was one."""
        if self._token is None or not self.busy:
            return False
        logger.info("🛑 Cancelling in-flight submission")
        self._token.cancel()
        return True

    # ------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------
    async def submit_text(self, text: str, token: Optional[CancellationToken] = None) -> AnalysisRecord:
        def validate() -> None:
            if len((text or "").strip()) < self.min_text_length:
                raise InvalidSubmission(EMPTY_INPUT_MESSAGE)

        async def extract() -> ExtractedText:
            return await self.detection.submit_text(text)

        return await self._run(DEFAULT_FILENAME, validate, extract, "Failed to submit text", token)

    async def submit_file(
        self,
        filename: str,
        content: bytes,
        content_type: Optional[str] = None,
        token: Optional[CancellationToken] = None,
    ) -> AnalysisRecord:
        def validate() -> None:
            if not filename or not content:
                raise InvalidSubmission(EMPTY_INPUT_MESSAGE)

        async def extract() -> ExtractedText:
            return await self.detection.upload_file(filename, content, content_type)

        return await self._run(filename or DEFAULT_FILENAME, validate, extract, "Failed to upload file", token)

    # ------------------------------------------------------
    # Run
    # ------------------------------------------------------
    async def _run(
        self,
        filename: str,
        validate: Callable[[], None],
        extract: Callable[[], Awaitable[ExtractedText]],
        extract_error: str,
        token: Optional[CancellationToken],
    ) -> AnalysisRecord:
        if self.busy:
            raise PipelineBusy("A submission is already being analyzed")

        token = token or CancellationToken()
        self._token = token
        self.progress = 0
        self.last_error = None
        record = AnalysisRecord(id=self.id_factory(), filename=filename, text="")
        self._transition(PipelineState.EXTRACTING, PROGRESS_START)

        try:
            # Step 1: normalized text
            validate()
            try:
                extracted = await token.guard(extract())
            except DetectionServiceError as e:
                raise ExtractionFailure(str(e)) from e
            if not extracted.success:
                raise ExtractionFailure(extract_error)
            record.text = extracted.text
            record.filename = extracted.filename or filename
            self.progress = max(self.progress, PROGRESS_TEXT_READY)

            # Step 2: detection check
            self._transition(PipelineState.CHECKING, PROGRESS_CHECK_SUBMITTED)
            record.status = AnalysisStatus.ANALYZING
            try:
                outcome = await token.guard(
                    self.detection.check(
                        record.text,
                        record.filename,
                        self.threshold_high,
                        self.threshold_medium,
                    )
                )
            except DetectionServiceError as e:
                raise CheckFailure(str(e)) from e
            self.progress = max(self.progress, PROGRESS_CHECK_COMPLETE)
            if not outcome.success:
                raise CheckFailure(outcome.error or "Plagiarism check failed")

            # Step 3: archive
            record.result = outcome.result
            record.matches = list(outcome.result.matches) if outcome.result else []
            record.status = AnalysisStatus.COMPLETED
            self._transition(PipelineState.COMPLETED, PROGRESS_DONE)
            self.history.set_current(record)
            self.history.add_to_history(record)
            logger.info(f"✅ Analysis {record.id} completed | file={record.filename}")
            return record

        except PipelineError as e:
            self._fail(record, str(e))
            e.record = record
            raise
        except asyncio.CancelledError:
            self._fail(record, "Submission was cancelled")
            raise
        except Exception as e:
            logger.error(f"❌ Unexpected pipeline failure: {e}", exc_info=True)
            failure = ExtractionFailure if self.state == PipelineState.EXTRACTING else CheckFailure
            self._fail(record, str(e))
            raise failure(str(e), record) from e
        finally:
            self._token = None

    def _fail(self, record: AnalysisRecord, message: str) -> None:
        record.status = AnalysisStatus.ERROR
        record.error = message
        self.last_error = message
        logger.warning(f"⚠️ Analysis {record.id} failed: {message}")
        self._transition(PipelineState.ERROR)
        self._transition(PipelineState.IDLE)
        self.progress = 0

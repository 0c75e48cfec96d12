"""
Exceptions raised by the integrity engine and its collaborators.
"""
from __future__ import annotations
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from integrity.core.entities import AnalysisRecord


class IntegrityError(Exception):
    """Base exception for the integrity dashboard backend"""

    pass


class DetectionServiceError(IntegrityError):
    """Raised by the detection client when a call fails or returns garbage"""

    def __init__(self, message: str, status_code: Optional[int] = None, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.status_code = status_code
        self.original_error = original_error


class ServiceUnavailable(IntegrityError):
    """Raised when the detection service health probe fails"""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.original_error = original_error


class PipelineError(IntegrityError):
    """A submission run failed; `record` is the analysis left in `error` state"""

    def __init__(self, message: str, record: Optional["AnalysisRecord"] = None):
        super().__init__(message)
        self.record = record


class ExtractionFailure(PipelineError):
    pass


class InvalidSubmission(ExtractionFailure):
    """Nothing usable was submitted; the detection service was not called"""

    pass


class CheckFailure(PipelineError):
    pass


class PipelineCancelled(PipelineError):
    pass


class PipelineBusy(PipelineError):
    pass


class InvalidPipelineTransition(IntegrityError):
    def __init__(self, source: str, target: str):
        super().__init__(f"Invalid pipeline transition: {source} -> {target}")
        self.source = source
        self.target = target


class SessionNotFound(IntegrityError):
    def __init__(self, session_id: str):
        super().__init__(f"Session '{session_id}' not found")
        self.session_id = session_id

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from threading import Lock
from typing import Callable, Dict
from uuid import uuid4
import logging

from integrity.core.exceptions import SessionNotFound
from integrity.core.ports.history import IHistoryStore
from integrity.core.services.submission_pipeline import SubmissionPipeline

logger = logging.getLogger("integrity.session")


@dataclass
class SessionContext:
    """Everything one reviewer sees during a session. Discarded on logout."""
    session_id: str
    history: IHistoryStore
    pipeline: SubmissionPipeline
    created_at: datetime = field(default_factory=datetime.now)


SessionFactory = Callable[[str], SessionContext]


class SessionRegistry:
    """Explicit lifecycle for session contexts: create on login, discard on logout."""

    def __init__(self, factory: SessionFactory):
        self._factory = factory
        self._sessions: Dict[str, SessionContext] = {}
        self._lock = Lock()

    def create(self) -> SessionContext:
        session = self._factory(uuid4().hex)
        with self._lock:
            self._sessions[session.session_id] = session
        logger.info(f"🆕 Session {session.session_id} created")
        return session

    def get(self, session_id: str) -> SessionContext:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def discard(self, session_id: str) -> None:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFound(session_id)
        session.pipeline.cancel()
        logger.info(f"🧹 Session {session_id} discarded ({len(session.history)} record(s) dropped)")

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

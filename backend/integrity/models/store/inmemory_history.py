from __future__ import annotations
from threading import Lock
from typing import List, Optional
import logging

from integrity.core.entities import AnalysisRecord
from integrity.core.ports.history import IHistoryStore

logger = logging.getLogger("integrity.history")

DEFAULT_CAPACITY = 50


class InMemoryHistoryStore(IHistoryStore):
    """
    Session ledger of analyses, most-recent-first, bounded to `capacity`.
    Lives only in process memory. `current` is tracked separately and is not
    part of the history until someone archives it.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("History capacity must be at least 1")
        self._capacity = capacity
        self._current: Optional[AnalysisRecord] = None
        self._history: List[AnalysisRecord] = []
        self._lock = Lock()

    @property
    def current(self) -> Optional[AnalysisRecord]:
        with self._lock:
            return self._current

    @property
    def history(self) -> List[AnalysisRecord]:
        with self._lock:
            return list(self._history)

    @property
    def capacity(self) -> int:
        return self._capacity

    def set_current(self, record: Optional[AnalysisRecord]) -> None:
        with self._lock:
            self._current = record

    def add_to_history(self, record: AnalysisRecord) -> None:
        # No dedup by id: callers must not archive the same record twice.
        with self._lock:
            self._history.insert(0, record)
            evicted = len(self._history) - self._capacity
            if evicted > 0:
                del self._history[self._capacity:]
                logger.debug(f"Evicted {evicted} oldest record(s) from history")

    def clear_history(self) -> None:
        with self._lock:
            self._history.clear()

    def get_by_id(self, record_id: str) -> Optional[AnalysisRecord]:
        with self._lock:
            if self._current is not None and self._current.id == record_id:
                return self._current
            return next((r for r in self._history if r.id == record_id), None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._history)

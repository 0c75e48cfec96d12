from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional
from integrity.core.entities import AnalysisRecord

class IHistoryStore(ABC):
    @property
    @abstractmethod
    def current(self) -> Optional[AnalysisRecord]: ...
    @property
    @abstractmethod
    def history(self) -> List[AnalysisRecord]:
        """Snapshot, most-recent-first"""
        ...
    @property
    @abstractmethod
    def capacity(self) -> int: ...
    @abstractmethod
    def set_current(self, record: Optional[AnalysisRecord]) -> None: ...
    @abstractmethod
    def add_to_history(self, record: AnalysisRecord) -> None: ...
    @abstractmethod
    def clear_history(self) -> None: ...
    @abstractmethod
    def get_by_id(self, record_id: str) -> Optional[AnalysisRecord]: ...
    @abstractmethod
    def __len__(self) -> int: ...

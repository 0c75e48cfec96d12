from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional

from integrity.core.entities import Match, MatchType


@dataclass(frozen=True)
class SourceEntry:
    """First match seen for a source, plus its 1-based display id."""
    display_id: int
    source_id: str
    chunk_id: int
    similarity_score: float
    source_text: str
    match_type: MatchType


class SourceRegistry:
    """
    Deduplicated sources of one document, in first-occurrence order.
    Display ids are contiguous 1..N and derived per build; they are never stored.
    """

    def __init__(self) -> None:
        self._entries: List[SourceEntry] = []
        self._by_source: Dict[str, SourceEntry] = {}

    @classmethod
    def from_matches(cls, matches: Iterable[Match]) -> "SourceRegistry":
        registry = cls()
        for m in matches:
            registry.register(m)
        return registry

    def register(self, match: Match) -> int:
        existing = self._by_source.get(match.source_id)
        if existing is not None:
            return existing.display_id
        entry = SourceEntry(
            display_id=len(self._entries) + 1,
            source_id=match.source_id,
            chunk_id=match.chunk_id,
            similarity_score=match.similarity_score,
            source_text=match.source_text,
            match_type=match.match_type,
        )
        self._entries.append(entry)
        self._by_source[match.source_id] = entry
        return entry.display_id

    def by_source_id(self, source_id: str) -> Optional[SourceEntry]:
        return self._by_source.get(source_id)

    def by_display_id(self, display_id: int) -> Optional[SourceEntry]:
        if 1 <= display_id <= len(self._entries):
            return self._entries[display_id - 1]
        return None

    def display_id_for(self, source_id: str) -> Optional[int]:
        entry = self._by_source.get(source_id)
        return entry.display_id if entry else None

    @property
    def entries(self) -> List[SourceEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SourceEntry]:
        return iter(self._entries)

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from integrity.core.entities import Match, MatchType, TextChunk
from integrity.core.services.source_registry import SourceRegistry

DEFAULT_HIGHLIGHT_THRESHOLD = 0.5


@dataclass(frozen=True)
class ChunkHighlight:
    chunk_id: int
    text: str
    start_pos: int
    end_pos: int
    matched: bool = False
    match_type: Optional[MatchType] = None
    similarity_score: Optional[float] = None
    source_display_id: Optional[int] = None
    match_count: int = 0


def index_matches_by_chunk(matches: Iterable[Match]) -> Dict[int, List[Match]]:
    """Group matches by chunk id, keeping their relative order."""
    by_chunk: Dict[int, List[Match]] = {}
    for m in matches:
        by_chunk.setdefault(m.chunk_id, []).append(m)
    return by_chunk


def select_best_match(matches: Sequence[Match]) -> Optional[Match]:
    """
    Highest similarity wins; on a tie the earliest match is kept,
    since a later one only replaces the running best when strictly greater.
    """
    best: Optional[Match] = None
    for m in matches:
        if best is None or m.similarity_score > best.similarity_score:
            best = m
    return best


def highlight_chunk(
    chunk: TextChunk,
    matches: Sequence[Match],
    registry: SourceRegistry,
    threshold: float = DEFAULT_HIGHLIGHT_THRESHOLD,
) -> ChunkHighlight:
    best = select_best_match(matches)
    if best is None or best.similarity_score < threshold:
        return ChunkHighlight(
            chunk_id=chunk.chunk_id,
            text=chunk.text,
            start_pos=chunk.start_pos,
            end_pos=chunk.end_pos,
            match_count=len(matches),
        )
    return ChunkHighlight(
        chunk_id=chunk.chunk_id,
        text=chunk.text,
        start_pos=chunk.start_pos,
        end_pos=chunk.end_pos,
        matched=True,
        match_type=best.match_type,
        similarity_score=best.similarity_score,
        source_display_id=registry.display_id_for(best.source_id),
        match_count=len(matches),
    )


def build_chunk_highlights(
    chunks: Sequence[TextChunk],
    matches: Sequence[Match],
    registry: SourceRegistry,
    threshold: float = DEFAULT_HIGHLIGHT_THRESHOLD,
) -> List[ChunkHighlight]:
    """One highlight decision per chunk, in chunk order. Matches pointing at unknown chunks are not rendered."""
    by_chunk = index_matches_by_chunk(matches)
    return [
        highlight_chunk(chunk, by_chunk.get(chunk.chunk_id, []), registry, threshold)
        for chunk in chunks
    ]

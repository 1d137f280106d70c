"""Query parsing and retrieval result models."""
from dataclasses import dataclass, field
from typing import List

from .chunk import ScoredChunk


@dataclass
class ParsedQuery:
    """A query split into its @mentions and the remaining question text."""
    query: str
    mentions: List[str] = field(default_factory=list)
    clean_query: str = ""

    @property
    def retrieval_query(self) -> str:
        """Text to score chunks against; a mention-only query falls back to the original."""
        return self.clean_query or self.query


@dataclass
class RetrievalResult:
    """Chunks selected for a chat query along with how the query was read."""
    query: str
    clean_query: str
    mentions: List[str]
    chunks: List[ScoredChunk]

    @property
    def sources(self) -> List[str]:
        return [chunk.file_name for chunk in self.chunks]

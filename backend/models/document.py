"""Document data models."""
from dataclasses import dataclass, field
from typing import Literal, Tuple, Union


@dataclass(frozen=True)
class Document:
    """An uploaded document and its ordered chunks."""
    id: str
    file_name: str
    chunks: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def chunk_count(self) -> int:
        return len(self.chunks)


@dataclass
class UploadSuccess:
    """Outcome of a file that was extracted, chunked and stored."""
    file_name: str
    chunk_count: int
    document_id: str
    success: Literal[True] = True


@dataclass
class UploadFailure:
    """Outcome of a file that could not be stored."""
    file_name: str
    reason: str
    success: Literal[False] = False


UploadOutcome = Union[UploadSuccess, UploadFailure]

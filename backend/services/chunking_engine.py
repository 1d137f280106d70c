"""Chunking engine producing overlapping fixed-size character windows."""
import logging
from typing import List

from config import CHUNK_SIZE, CHUNK_OVERLAP
from services.errors import InvalidConfigurationError

logger = logging.getLogger(__name__)


class ChunkingEngine:
    """Segments extracted document text into overlapping chunks."""

    def __init__(self, chunk_size: int = CHUNK_SIZE, chunk_overlap: int = CHUNK_OVERLAP):
        """
        Initialize ChunkingEngine.

        Args:
            chunk_size: Maximum chunk length in characters
            chunk_overlap: Characters shared between consecutive chunks

        Raises:
            InvalidConfigurationError: If the window would never advance
        """
        if chunk_size <= 0:
            raise InvalidConfigurationError(f"chunk_size must be positive, got {chunk_size}")
        if chunk_overlap < 0:
            raise InvalidConfigurationError(f"chunk_overlap must be >= 0, got {chunk_overlap}")
        if chunk_size - chunk_overlap <= 0:
            raise InvalidConfigurationError(
                f"chunk_overlap ({chunk_overlap}) must be smaller than chunk_size ({chunk_size})"
            )

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    def split(self, text: str) -> List[str]:
        """
        Split text into windows of at most `chunk_size` characters.

        Each window starts `chunk_overlap` characters before the end of the
        previous one. Splitting stops as soon as a window reaches the end of
        the text, so the last chunk may be shorter than `chunk_size`.

        Args:
            text: Plain text extracted from a document

        Returns:
            Ordered list of chunks; empty for empty or whitespace-only text
        """
        if not text or not text.strip():
            return []

        chunks = []
        length = len(text)
        start = 0

        while start < length:
            end = min(start + self.chunk_size, length)
            chunks.append(text[start:end])
            start = end - self.chunk_overlap
            if start + self.chunk_overlap >= length:
                break

        logger.debug(f"Split {length} characters into {len(chunks)} chunks")
        return chunks


def split_into_chunks(text: str, chunk_size: int = CHUNK_SIZE, overlap: int = CHUNK_OVERLAP) -> List[str]:
    """Split text with a one-off ChunkingEngine."""
    return ChunkingEngine(chunk_size, overlap).split(text)

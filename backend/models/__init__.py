"""Data models for the MentionRAG service."""
from .document import Document, UploadSuccess, UploadFailure, UploadOutcome
from .chunk import ScoredChunk
from .conversation import Turn, USER_ROLE, ASSISTANT_ROLE
from .query import ParsedQuery, RetrievalResult

__all__ = [
    "Document",
    "UploadSuccess",
    "UploadFailure",
    "UploadOutcome",
    "ScoredChunk",
    "Turn",
    "USER_ROLE",
    "ASSISTANT_ROLE",
    "ParsedQuery",
    "RetrievalResult",
]

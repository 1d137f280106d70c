"""Services for the MentionRAG document chat API."""
from .errors import (
    RetrievalError,
    CapacityExceededError,
    DocumentNotFoundError,
    NoDocumentsError,
    UnsupportedInputError,
    InvalidConfigurationError,
)
from .chunking_engine import ChunkingEngine, split_into_chunks
from .mention_parser import parse_mentions
from .document_matcher import doc_matches_mentions
from .document_store import DocumentStore
from .retrieval_engine import RetrievalEngine
from .conversation_manager import ConversationManager
from .document_loader import DocumentLoader
from .llm_client import LLMClient, LLMResponse, LLMError, GenerationFailedError

__all__ = ['RetrievalError', 'CapacityExceededError', 'DocumentNotFoundError', 'NoDocumentsError', 'UnsupportedInputError', 'InvalidConfigurationError', 'ChunkingEngine', 'split_into_chunks', 'parse_mentions', 'doc_matches_mentions', 'DocumentStore', 'RetrievalEngine', 'ConversationManager', 'DocumentLoader', 'LLMClient', 'LLMResponse', 'LLMError', 'GenerationFailedError']

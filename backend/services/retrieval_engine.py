"""Retrieval engine for lexical chunk scoring with @mention filtering."""
import logging
import math
from typing import List, Optional, Sequence

from config import TOP_K, MIN_CHUNKS_PER_DOCUMENT, MIN_KEYWORD_LENGTH
from models.chunk import ScoredChunk
from models.document import Document
from models.query import RetrievalResult
from services.document_matcher import doc_matches_mentions
from services.document_store import DocumentStore
from services.errors import NoDocumentsError
from services.mention_parser import parse_mentions

logger = logging.getLogger(__name__)


def extract_keywords(query: str) -> List[str]:
    """Lower-cased whitespace tokens of the query, ignoring tokens of two characters or fewer."""
    return [word for word in query.lower().split() if len(word) >= MIN_KEYWORD_LENGTH]


def score_chunk(chunk_lower: str, keywords: Sequence[str]) -> int:
    """Count the keywords contained in an already lower-cased chunk."""
    return sum(1 for word in keywords if word in chunk_lower)


def _by_score(chunks: List[ScoredChunk]) -> List[ScoredChunk]:
    # sorted() is stable, so equal scores keep document then chunk order
    return sorted(chunks, key=lambda scored: scored.score, reverse=True)


class RetrievalEngine:
    """Score stored chunks against a query and select the context for the LLM."""

    def __init__(
        self,
        document_store: DocumentStore,
        top_k: int = TOP_K,
        min_per_document: int = MIN_CHUNKS_PER_DOCUMENT,
    ):
        """
        Initialize the retrieval engine.

        Args:
            document_store: Store whose documents are searched
            top_k: Default number of chunks to return
            min_per_document: Chunk floor per document when several are mentioned
        """
        self.document_store = document_store
        self.top_k = top_k
        self.min_per_document = min_per_document
        logger.info("Initialized RetrievalEngine")

    def search(self, query: str, top_k: Optional[int] = None) -> RetrievalResult:
        """
        Parse @mentions out of a chat query and retrieve chunks for it.

        Args:
            query: Raw user query
            top_k: Number of chunks to select (defaults to the engine's top_k)

        Returns:
            RetrievalResult with the selected chunks, mentions and clean query

        Raises:
            NoDocumentsError: If nothing has been uploaded yet
        """
        if len(self.document_store) == 0:
            raise NoDocumentsError()

        parsed = parse_mentions(query)
        chunks = self.retrieve(parsed.retrieval_query, top_k=top_k, target_file_names=parsed.mentions)

        return RetrievalResult(
            query=query,
            clean_query=parsed.clean_query,
            mentions=parsed.mentions,
            chunks=chunks,
        )

    def retrieve(
        self,
        query: str,
        top_k: Optional[int] = None,
        target_file_names: Optional[Sequence[str]] = None,
    ) -> List[ScoredChunk]:
        """
        Rank chunks by keyword overlap with the query.

        Selection works in one of two modes:
        1. Pooled: with at most one mention, or only one matching document,
           all chunks are ranked together and the best `top_k` are returned.
        2. Balanced: with several mentions matching several documents, each
           document contributes its best max(min_per_document, ceil(top_k / n))
           chunks, so the result may hold more than `top_k` chunks.

        Args:
            query: Question text (mentions already removed)
            top_k: Number of chunks to select (defaults to the engine's top_k)
            target_file_names: Mention tokens restricting the searched documents

        Returns:
            Scored chunks ordered by descending score
        """
        top_k = self.top_k if top_k is None else top_k
        targets = list(target_file_names or [])
        keywords = extract_keywords(query)

        documents = self.document_store.snapshot()
        logger.info(f"Retrieving for query: {query[:100]!r} ({len(documents)} documents in store)")
        if targets:
            logger.info(f"Filtering by mentions: {', '.join(targets)}")

        scored_by_document: List[List[ScoredChunk]] = []
        for document in documents:
            if targets:
                if not doc_matches_mentions(document.file_name, targets):
                    continue
                logger.debug(f"Matched: {document.file_name}")

            scored_by_document.append(self._score_document(document, keywords))

        if len(targets) > 1 and len(scored_by_document) > 1:
            per_document = max(self.min_per_document, math.ceil(top_k / len(scored_by_document)))
            selected = []
            for document_chunks in scored_by_document:
                selected.extend(_by_score(document_chunks)[:per_document])
            result = _by_score(selected)
            logger.info(
                f"Multi-document mode: {per_document} chunks per document, {len(result)} total"
            )
        else:
            pooled = [chunk for document_chunks in scored_by_document for chunk in document_chunks]
            result = _by_score(pooled)[:top_k]

        logger.info(
            f"Returning {len(result)} chunks from "
            f"{len({chunk.file_name for chunk in result})} document(s)"
        )
        return result

    @staticmethod
    def _score_document(document: Document, keywords: Sequence[str]) -> List[ScoredChunk]:
        logger.debug(f"Scoring {document.file_name}: {document.chunk_count} chunks")
        return [
            ScoredChunk(
                text=chunk,
                score=score_chunk(chunk.lower(), keywords),
                file_name=document.file_name,
                index=index,
            )
            for index, chunk in enumerate(document.chunks)
        ]

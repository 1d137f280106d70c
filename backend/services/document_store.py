"""In-memory store for uploaded documents."""
import logging
import threading
import uuid
from typing import Iterable, List, Optional, Tuple

from config import MAX_DOCUMENTS
from models.document import Document
from services.errors import CapacityExceededError, DocumentNotFoundError

logger = logging.getLogger(__name__)


class DocumentStore:
    """
    Holds at most `max_documents` documents in upload order.

    Contents live only as long as the store object; there is no persistence.
    A single lock covers add, delete and snapshot so retrieval never sees a
    list that is being compacted by a delete.
    """

    def __init__(self, max_documents: int = MAX_DOCUMENTS):
        self.max_documents = max_documents
        self._documents: List[Document] = []
        self._lock = threading.Lock()
        logger.info(f"DocumentStore initialized (capacity: {max_documents})")

    def __len__(self) -> int:
        return len(self._documents)

    @property
    def is_full(self) -> bool:
        return len(self._documents) >= self.max_documents

    def snapshot(self) -> Tuple[Document, ...]:
        """Return a consistent, ordered view of the stored documents."""
        with self._lock:
            return tuple(self._documents)

    def list_documents(self) -> List[Document]:
        return list(self.snapshot())

    def get_document(self, document_id: str) -> Optional[Document]:
        for document in self.snapshot():
            if document.id == document_id:
                return document
        return None

    def add_document(self, file_name: str, chunks: Iterable[str]) -> str:
        """
        Store a new document.

        Args:
            file_name: Original file name, used for @mention matching and citations
            chunks: Ordered chunks of the document's text

        Returns:
            Id of the stored document

        Raises:
            CapacityExceededError: If the store is already full
        """
        with self._lock:
            if len(self._documents) >= self.max_documents:
                logger.warning(f"Rejected {file_name}: store holds {len(self._documents)} documents")
                raise CapacityExceededError(self.max_documents)

            document = Document(
                id=self._generate_document_id(),
                file_name=file_name,
                chunks=tuple(chunks),
            )
            self._documents.append(document)

        logger.info(f"Stored document {document.id}: {file_name} ({document.chunk_count} chunks)")
        return document.id

    def delete_document(self, document_id: str) -> Document:
        """
        Remove a document by id.

        Returns:
            The removed document

        Raises:
            DocumentNotFoundError: If no document has this id
        """
        with self._lock:
            for position, document in enumerate(self._documents):
                if document.id == document_id:
                    del self._documents[position]
                    break
            else:
                raise DocumentNotFoundError(document_id)

        logger.info(f"Deleted document {document_id}: {document.file_name}")
        return document

    def clear(self) -> None:
        with self._lock:
            self._documents.clear()
        logger.info("DocumentStore cleared")

    def _generate_document_id(self) -> str:
        while True:
            document_id = f"doc_{uuid.uuid4().hex[:12]}"
            if all(document.id != document_id for document in self._documents):
                return document_id

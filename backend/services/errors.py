"""Exceptions raised by the retrieval core.

The HTTP layer maps each of these to a status code; none of them are retried.
"""
from typing import Optional


class RetrievalError(Exception):
    """Base class for document store and retrieval errors."""

    default_message = "Retrieval error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class CapacityExceededError(RetrievalError):
    """The document store already holds its maximum number of documents."""

    default_message = "Maximum documents reached. Please delete a document first."

    def __init__(self, max_documents: int):
        self.max_documents = max_documents
        super().__init__(
            f"Maximum {max_documents} documents allowed. Please delete a document first."
        )


class DocumentNotFoundError(RetrievalError):
    """No document with the requested id is stored."""

    default_message = "Document not found"

    def __init__(self, document_id: str):
        self.document_id = document_id
        super().__init__(f"Document not found: {document_id}")


class NoDocumentsError(RetrievalError):
    """Retrieval was requested while the store is empty."""

    default_message = "No documents uploaded. Please upload documents first."


class UnsupportedInputError(RetrievalError):
    """An uploaded file cannot be turned into text."""

    default_message = "Invalid file type. Only PDF, DOCX, and TXT files are allowed."


class InvalidConfigurationError(RetrievalError):
    """A component was constructed with parameters it cannot work with."""

    default_message = "Invalid configuration"

"""Document loading service for extracting text from uploaded files."""
import io
import logging

import fitz  # PyMuPDF
from docx import Document as DocxDocument

from config import (
    ALLOWED_MIME_TYPES,
    DOCX_MIME_TYPE,
    MSWORD_MIME_TYPE,
    PDF_MIME_TYPE,
    TEXT_MIME_TYPE,
)
from services.errors import UnsupportedInputError

logger = logging.getLogger(__name__)


class DocumentLoader:
    """Extracts plain text from PDF, Word and text uploads."""

    def is_supported(self, content_type: str) -> bool:
        return content_type in ALLOWED_MIME_TYPES

    def extract_text(self, file_name: str, content_type: str, data: bytes) -> str:
        """
        Extract the text of an uploaded file.

        Args:
            file_name: Original file name (for logging)
            content_type: MIME type reported by the client
            data: Raw file contents

        Returns:
            Extracted text, possibly empty

        Raises:
            UnsupportedInputError: If the MIME type is not supported or the
                file cannot be parsed
        """
        if content_type == TEXT_MIME_TYPE:
            text = data.decode("utf-8", errors="replace")
        elif content_type in (PDF_MIME_TYPE, DOCX_MIME_TYPE):
            try:
                if content_type == PDF_MIME_TYPE:
                    text = self._load_pdf(data)
                else:
                    text = self._load_docx(data)
            except Exception as e:
                logger.error(f"Failed to read {file_name}: {str(e)}")
                raise UnsupportedInputError(f"Could not read {file_name}: {str(e)}") from e
        elif content_type == MSWORD_MIME_TYPE:
            # Legacy .doc has no parser here; read whatever text it carries
            text = data.decode("utf-8", errors="ignore")
        else:
            raise UnsupportedInputError()

        logger.info(f"Extracted {len(text)} characters from {file_name} ({content_type})")
        return text

    def _load_pdf(self, data: bytes) -> str:
        """
        Extract text page-by-page from PDF bytes.

        Args:
            data: PDF file contents

        Returns:
            Page texts joined with newlines
        """
        pages = []
        with fitz.open(stream=data, filetype="pdf") as pdf_document:
            for page in pdf_document:
                pages.append(page.get_text())
        return "\n".join(pages)

    def _load_docx(self, data: bytes) -> str:
        document = DocxDocument(io.BytesIO(data))
        return "\n".join(paragraph.text for paragraph in document.paragraphs)

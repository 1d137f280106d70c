"""Configuration management for the MentionRAG document chat service."""
import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# API Keys
GROQ_API_KEY = os.getenv("GROQ_API_KEY")

# Server Configuration
PORT = int(os.getenv("PORT", "3001"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # "text" or "json"

# CORS Configuration
CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:5173"
).split(",")

# Model Configuration
LLM_MODEL = os.getenv("LLM_MODEL", "llama-3.1-8b-instant")
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "1024"))

# Chunking Configuration
CHUNK_SIZE = 1000  # characters
CHUNK_OVERLAP = 200  # characters

# Retrieval Configuration
TOP_K = 5
MIN_CHUNKS_PER_DOCUMENT = 3  # floor per document in multi-mention mode
MIN_KEYWORD_LENGTH = 3

# Store Configuration
MAX_DOCUMENTS = 5
HISTORY_TURNS_IN_PROMPT = 3

# Upload Configuration
MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10MB
MAX_UPLOAD_FILES = 10
PDF_MIME_TYPE = "application/pdf"
TEXT_MIME_TYPE = "text/plain"
MSWORD_MIME_TYPE = "application/msword"
DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
ALLOWED_MIME_TYPES = (PDF_MIME_TYPE, TEXT_MIME_TYPE, MSWORD_MIME_TYPE, DOCX_MIME_TYPE)

# Logging Configuration
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

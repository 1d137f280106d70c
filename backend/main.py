"""Main entry point for the MentionRAG document chat API."""
import json
import logging
from typing import List, Optional

from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse

from config import (
    CORS_ORIGINS,
    HISTORY_TURNS_IN_PROMPT,
    LOG_FORMAT,
    LOG_LEVEL,
    MAX_UPLOAD_BYTES,
    MAX_UPLOAD_FILES,
    PORT,
)
from logger import setup_logging
from models.api import (
    ChatRequest,
    ChatResponse,
    DeleteResponse,
    DocumentInfo,
    DocumentListResponse,
    HistoryMessage,
    HistoryResponse,
    MultiUploadResponse,
    UploadErrorResult,
    UploadResponse,
)
from models.document import UploadFailure, UploadOutcome, UploadSuccess
from models.query import RetrievalResult
from services.chunking_engine import ChunkingEngine
from services.conversation_manager import ConversationManager
from services.document_loader import DocumentLoader
from services.document_store import DocumentStore
from services.errors import (
    CapacityExceededError,
    DocumentNotFoundError,
    NoDocumentsError,
    RetrievalError,
    UnsupportedInputError,
)
from services.llm_client import GenerationFailedError, LLMClient, LLMError
from services.retrieval_engine import RetrievalEngine

# Initialize logging
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="MentionRAG",
    description="Chat with up to five uploaded documents, targeting them with @mentions",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services (will be done on startup)
document_store: DocumentStore = None
chunking_engine: ChunkingEngine = None
document_loader: DocumentLoader = None
retrieval_engine: RetrievalEngine = None
conversation_manager: ConversationManager = None
llm_client: Optional[LLMClient] = None

ERROR_STATUS_CODES = {
    CapacityExceededError: 400,
    NoDocumentsError: 400,
    DocumentNotFoundError: 404,
    UnsupportedInputError: 415,
}


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    global document_store, chunking_engine, document_loader, retrieval_engine
    global conversation_manager, llm_client

    if LOG_FORMAT == "json":
        setup_logging(LOG_LEVEL)

    logger.info("Initializing MentionRAG services...")

    document_store = DocumentStore()
    chunking_engine = ChunkingEngine()
    document_loader = DocumentLoader()
    retrieval_engine = RetrievalEngine(document_store)
    conversation_manager = ConversationManager()

    try:
        llm_client = LLMClient()
    except ValueError as e:
        llm_client = None
        logger.warning(f"{e}. Chat functionality will not work.")

    logger.info("All services initialized successfully")


@app.exception_handler(RetrievalError)
async def retrieval_error_handler(request: Request, exc: RetrievalError) -> JSONResponse:
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=status_code, content={"success": False, "error": exc.message})


@app.exception_handler(GenerationFailedError)
async def generation_error_handler(request: Request, exc: GenerationFailedError) -> JSONResponse:
    logger.error(f"LLM client error: {exc.error.message}")
    return JSONResponse(
        status_code=503,
        content={
            "error": {
                "code": exc.error.code,
                "message": exc.error.message,
                "details": exc.error.details
            }
        }
    )


@app.get("/api/health")
async def health():
    """Health check with the number of stored documents."""
    return {"status": "ok", "documents_count": len(document_store)}


@app.get("/api/documents", response_model=DocumentListResponse)
async def list_documents() -> DocumentListResponse:
    """List uploaded documents, e.g. for @mention autocomplete."""
    documents = [
        DocumentInfo(id=document.id, file_name=document.file_name, chunks_count=document.chunk_count)
        for document in document_store.list_documents()
    ]
    return DocumentListResponse(documents=documents, max_documents=document_store.max_documents)


@app.delete("/api/documents/{document_id}", response_model=DeleteResponse)
async def delete_document(document_id: str) -> DeleteResponse:
    deleted = document_store.delete_document(document_id)
    return DeleteResponse(success=True, file_name=deleted.file_name)


async def _ingest_upload(upload: UploadFile) -> UploadSuccess:
    """
    Extract, chunk and store one uploaded file.

    Raises:
        HTTPException: 413 if the file exceeds the upload size limit
        UnsupportedInputError: If the file type is not supported
        CapacityExceededError: If the store is full
    """
    file_name = upload.filename or "untitled"
    content_type = (upload.content_type or "").split(";")[0].strip().lower()

    if not document_loader.is_supported(content_type):
        raise UnsupportedInputError()
    if document_store.is_full:
        raise CapacityExceededError(document_store.max_documents)

    data = await upload.read()
    if len(data) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"{file_name} exceeds the {MAX_UPLOAD_BYTES // (1024 * 1024)}MB upload limit"
        )

    text = await run_in_threadpool(document_loader.extract_text, file_name, content_type, data)
    chunks = chunking_engine.split(text)
    document_id = document_store.add_document(file_name, chunks)

    return UploadSuccess(file_name=file_name, chunk_count=len(chunks), document_id=document_id)


def _to_upload_result(outcome: UploadOutcome):
    if isinstance(outcome, UploadSuccess):
        return UploadResponse(
            file_name=outcome.file_name,
            total_chunks=outcome.chunk_count,
            document_id=outcome.document_id
        )
    return UploadErrorResult(file_name=outcome.file_name, error=outcome.reason)


@app.post("/api/upload", response_model=UploadResponse)
async def upload_document(document: Optional[UploadFile] = File(None)) -> UploadResponse:
    """Upload a single PDF, DOCX or TXT document."""
    if document is None:
        raise HTTPException(status_code=400, detail="No file uploaded")

    outcome = await _ingest_upload(document)
    return _to_upload_result(outcome)


@app.post("/api/upload/multiple", response_model=MultiUploadResponse)
async def upload_documents(documents: Optional[List[UploadFile]] = File(None)) -> MultiUploadResponse:
    """
    Upload several documents at once.

    Every file is processed independently; a file that cannot be stored is
    reported as a failed result without affecting the others.
    """
    if not documents:
        raise HTTPException(status_code=400, detail="No files uploaded")
    if len(documents) > MAX_UPLOAD_FILES:
        raise HTTPException(status_code=400, detail=f"At most {MAX_UPLOAD_FILES} files per upload")

    outcomes: List[UploadOutcome] = []
    for upload in documents:
        file_name = upload.filename or "untitled"
        try:
            outcomes.append(await _ingest_upload(upload))
        except RetrievalError as e:
            outcomes.append(UploadFailure(file_name=file_name, reason=e.message))
        except HTTPException as e:
            outcomes.append(UploadFailure(file_name=file_name, reason=str(e.detail)))
        except Exception as e:
            logger.error(f"Upload error for {file_name}: {e}", exc_info=True)
            outcomes.append(UploadFailure(file_name=file_name, reason=str(e)))

    return MultiUploadResponse(success=True, results=[_to_upload_result(o) for o in outcomes])


def _require_llm_client() -> LLMClient:
    if llm_client is None:
        raise GenerationFailedError(LLMError(
            code="CONFIGURATION_ERROR",
            message="GROQ_API_KEY not set. Chat functionality is unavailable.",
            details={}
        ))
    return llm_client


def _build_prompt(retrieval: RetrievalResult, session_id: Optional[str]) -> str:
    conversation_history = ""
    if session_id:
        conversation_history = conversation_manager.get_context(session_id, max_turns=HISTORY_TURNS_IN_PROMPT)

    return LLMClient.build_prompt(
        query=retrieval.clean_query or retrieval.query,
        retrieved_chunks=retrieval.chunks,
        mentions=retrieval.mentions,
        conversation_history=conversation_history or None
    )


@app.post("/api/chat", response_model=ChatResponse)
async def chat_endpoint(request: ChatRequest) -> ChatResponse:
    """
    Answer a question from the uploaded documents.

    @mentions in the query restrict retrieval to the referenced documents.
    """
    if not request.query.strip():
        raise HTTPException(status_code=400, detail="Query is required")

    logger.info(f"Processing query: {request.query[:100]}...")

    retrieval = retrieval_engine.search(request.query)
    client = _require_llm_client()
    prompt = _build_prompt(retrieval, request.session_id)

    llm_response = await run_in_threadpool(client.generate, prompt)

    if request.session_id:
        conversation_manager.add_exchange(request.session_id, request.query, llm_response.text)

    return ChatResponse(
        answer=llm_response.text,
        sources=retrieval.sources,
        mentions=retrieval.mentions
    )


def _sse_event(payload: dict) -> bytes:
    return f"data: {json.dumps(payload)}\n\n".encode("utf-8")


@app.post("/api/chat/stream")
async def chat_stream_endpoint(request: ChatRequest):
    """
    Streaming variant of /api/chat as Server-Sent Events.

    Events:
        - data: {"type": "token", "content": "..."} for each fragment
        - data: {"type": "done", "sources": [...], "mentions": [...]} at the end
        - data: {"type": "error", "error": {...}} if generation fails mid-stream
    """
    if not request.query.strip():
        raise HTTPException(status_code=400, detail="Query is required")

    logger.info(f"Processing streaming query: {request.query[:100]}...")

    retrieval = retrieval_engine.search(request.query)
    client = _require_llm_client()
    prompt = _build_prompt(retrieval, request.session_id)

    def generate_stream():
        accumulated_text = []
        try:
            for item in client.generate_stream(prompt):
                if item["type"] == "token":
                    accumulated_text.append(item["content"])
                    yield _sse_event(item)

            if request.session_id:
                conversation_manager.add_exchange(
                    request.session_id, request.query, "".join(accumulated_text)
                )

            yield _sse_event({
                "type": "done",
                "sources": retrieval.sources,
                "mentions": retrieval.mentions
            })
        except GenerationFailedError as e:
            logger.error(f"LLM client error during streaming: {e.error.message}")
            yield _sse_event({
                "type": "error",
                "error": {"code": e.error.code, "message": e.error.message}
            })

    return StreamingResponse(
        generate_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no"  # Disable buffering in nginx
        }
    )


@app.get("/api/chat/history/{session_id}", response_model=HistoryResponse)
async def chat_history(session_id: str) -> HistoryResponse:
    history = [
        HistoryMessage(role=turn.role, content=turn.content)
        for turn in conversation_manager.get_history(session_id)
    ]
    return HistoryResponse(history=history)


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting MentionRAG API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)

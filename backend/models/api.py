"""Request and response schemas for the HTTP API."""
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    query: str = Field(..., min_length=1)
    session_id: Optional[str] = None


class ChatResponse(BaseModel):
    answer: str
    sources: List[str]
    mentions: List[str] = Field(default_factory=list)


class DocumentInfo(BaseModel):
    id: str
    file_name: str
    chunks_count: int


class DocumentListResponse(BaseModel):
    documents: List[DocumentInfo]
    max_documents: int


class DeleteResponse(BaseModel):
    success: bool
    file_name: str


class UploadResponse(BaseModel):
    success: Literal[True] = True
    file_name: str
    total_chunks: int
    document_id: str


class UploadErrorResult(BaseModel):
    success: Literal[False] = False
    file_name: str
    error: str


class MultiUploadResponse(BaseModel):
    success: bool = True
    results: List[Union[UploadResponse, UploadErrorResult]]


class HistoryMessage(BaseModel):
    role: str
    content: str


class HistoryResponse(BaseModel):
    history: List[HistoryMessage]

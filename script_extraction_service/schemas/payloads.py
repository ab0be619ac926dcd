"""Wire payloads exchanged with the AskYourPDF endpoints."""

from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


class UploadResponse(BaseModel):
    """Body returned by /v1/api/upload."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    doc_id: Optional[str] = Field(default=None, alias="docId")


class ChatMessage(BaseModel):
    sender: str = "User"
    message: str


class ChatRequest(BaseModel):
    """Body sent to /v1/api/knowledge_base_chat."""
    documents: List[str]
    messages: List[ChatMessage]
    stream: Literal[False] = False


class ChatAnswer(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: Optional[str] = None


class ChatResponse(BaseModel):
    """Body returned by /v1/api/knowledge_base_chat."""
    model_config = ConfigDict(extra="ignore")

    answer: Optional[ChatAnswer] = None


class ExtractionResult(BaseModel):
    """Text recovered for one uploaded document."""
    doc_id: str = Field(description="Identifier assigned by the service on upload")
    text: str = Field(description="Plain text returned by the knowledge-base chat endpoint")
    filename: Optional[str] = Field(default=None, description="Name of the uploaded file, when known")

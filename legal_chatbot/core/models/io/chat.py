"""
Chat I/O models for API requests and responses.

This module contains the Pydantic schemas of the chat endpoint and of the
source entries attached to answers. Field names follow the JSON contract of
the web client (``userId``, ``uploadedFiles``, ``matched_ids``).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ChatTurn(BaseModel):
    """One prior message of the conversation, as sent by the client."""

    model_config = ConfigDict(extra="allow")

    role: str = Field(description="user or assistant")
    content: str = Field(default="", description="Message text")


class UploadedFile(BaseModel):
    """Attachment metadata forwarded to the n8n workflow."""

    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    size: Optional[int] = None
    type: Optional[str] = None
    extracted_text: Optional[str] = Field(default=None, alias="extractedText")


class ChatRequest(BaseModel):
    """Body of ``POST /api/chat-enhanced``."""

    model_config = ConfigDict(populate_by_name=True)

    query: Optional[str] = Field(default=None, description="The user question")
    messages: List[ChatTurn] = Field(default_factory=list, description="Conversation history, oldest first")
    user_id: Optional[str] = Field(default=None, alias="userId", description="Client-side user id fallback")
    uploaded_files: List[UploadedFile] = Field(default_factory=list, alias="uploadedFiles")


class LawSource(BaseModel):
    """A legal document cited by an answer."""

    id: Union[int, str, None] = None
    title: str = "Văn bản pháp luật"
    article_reference: Optional[str] = None
    source: Optional[str] = None
    link: Optional[str] = None
    so_hieu: Optional[str] = None
    loai_van_ban: Optional[str] = None
    category: Optional[str] = None

    def to_link(self) -> "SourceLink":
        """Link-only view returned when the user explicitly asked for sources."""
        return SourceLink(id=self.id, link=self.link or self.source)


class SourceLink(BaseModel):
    """Minimal source entry: identifier and URL only."""

    id: Union[int, str, None]
    link: Optional[str] = None


class ChatResponse(BaseModel):
    """Answer of the chat endpoint."""

    response: str
    sources: List[Dict[str, Any]] = Field(default_factory=list)
    matched_ids: List[Any] = Field(default_factory=list)
    total_sources: int = 0
    search_method: str

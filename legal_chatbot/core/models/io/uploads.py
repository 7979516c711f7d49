"""
Upload I/O models (law documents and chat attachments).
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LawUploadData(BaseModel):
    id: Optional[int]
    title: Optional[str]
    text_length: int


class LawUploadResponse(BaseModel):
    success: bool = True
    message: str = "Upload thành công"
    data: LawUploadData


class AttachmentResponse(BaseModel):
    """Text extracted from a chat attachment, forwarded later as ``uploadedFiles``."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    file_name: Optional[str] = Field(default=None, alias="fileName")
    file_size: int = Field(alias="fileSize")
    file_type: str = Field(alias="fileType")
    extracted_text: str = Field(alias="extractedText")
    message: str = "File processed successfully"

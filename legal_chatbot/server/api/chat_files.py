"""
Chat attachment endpoint.

Extracts text from a file attached to a chat message so the client can send
it along with the next question (``uploadedFiles``). Nothing is stored.
"""

from typing import Optional

from fastapi import APIRouter, File, UploadFile

from legal_chatbot.core.logging_config import get_logger
from legal_chatbot.core.models.io.uploads import AttachmentResponse
from legal_chatbot.documents.extractors import (
    MB,
    SUPPORTED_ATTACHMENT_TYPES,
    attachment_type,
    extract_attachment_text,
)
from legal_chatbot.server.errors import ApiError

logger = get_logger(__name__)

router = APIRouter(tags=["chat-files"])


@router.post(
    "/upload-file",
    response_model=AttachmentResponse,
    summary="Process Chat Attachment",
    description="Extract the text of an image, PDF or plain text attachment.",
    responses={400: {"description": "No file, unsupported type or file too large"}},
)
async def upload_chat_file(file: Optional[UploadFile] = File(default=None)) -> AttachmentResponse:
    if file is None:
        raise ApiError(400, "No file provided")

    content_type = file.content_type or ""
    file_type = attachment_type(content_type)
    if file_type is None:
        raise ApiError(
            400, f"Unsupported file type: {content_type}", supportedTypes=list(SUPPORTED_ATTACHMENT_TYPES)
        )

    data = await file.read()
    if len(data) > file_type.max_size:
        raise ApiError(
            400, f"File size exceeds limit of {file_type.max_size // MB}MB", maxSize=file_type.max_size
        )

    logger.debug(f"Processing chat attachment {file.filename} ({file_type.label}, {len(data)} bytes)")
    return AttachmentResponse(
        file_name=file.filename,
        file_size=len(data),
        file_type=content_type,
        extracted_text=extract_attachment_text(content_type, data),
    )

"""
Law document upload endpoint.

``POST /api/laws/upload-word`` turns an uploaded Word, PDF or text file into
a ``laws`` row: the text is extracted, the title and metadata (document
number, dates, issuer, signer, ...) are parsed out of it, and the row becomes
searchable by the chat endpoint.
"""

from typing import Optional

from fastapi import APIRouter, File, Form, UploadFile
from sqlalchemy.exc import SQLAlchemyError

from legal_chatbot.core.database.repositories.laws import LawRepository
from legal_chatbot.core.logging_config import get_logger
from legal_chatbot.core.models.io.uploads import LawUploadData, LawUploadResponse
from legal_chatbot.core.monitoring import log_document_upload
from legal_chatbot.documents.extractors import (
    ALLOWED_EXTENSIONS,
    DocumentExtractionError,
    extract_document_text,
    has_allowed_extension,
)
from legal_chatbot.documents.metadata import build_law, resolve_title
from legal_chatbot.server.core.config import settings
from legal_chatbot.server.errors import ApiError
from legal_chatbot.server.services.deps import SessionDep

logger = get_logger(__name__)

router = APIRouter(tags=["laws"])

MIN_TEXT_LENGTH = 10

NO_FILE_MESSAGE = "Không có file được upload"
EMPTY_TEXT_MESSAGE = "Không thể đọc nội dung từ file. File có thể bị lỗi hoặc không đúng định dạng."
SHORT_TEXT_MESSAGE = "Nội dung file quá ngắn (dưới 10 ký tự). Vui lòng kiểm tra lại file."


@router.post(
    "/upload-word",
    response_model=LawUploadResponse,
    summary="Upload Law Document",
    description=(
        "Upload a .docx, .pdf, .txt or .rtf legal document. Its text and metadata are extracted and stored "
        "as a new law."
    ),
    responses={
        400: {"description": "Missing, unsupported, unreadable or empty file"},
        500: {"description": "The document could not be stored"},
    },
)
async def upload_law_document(
    session: SessionDep,
    file: Optional[UploadFile] = File(default=None),
    title: Optional[str] = Form(default=None),
) -> LawUploadResponse:
    """
    Upload a law document.

    - **file**: The document (.doc is rejected; convert it to .docx first).
    - **title**: Optional title; found in the document when omitted.
    """
    if file is None or not file.filename:
        raise ApiError(400, NO_FILE_MESSAGE)
    if not has_allowed_extension(file.filename):
        raise ApiError(400, f"Chỉ chấp nhận file: {', '.join(ALLOWED_EXTENSIONS)}")

    data = await file.read()
    upload = settings.upload
    if len(data) > upload.max_size_bytes:
        raise ApiError(400, f"File vượt quá giới hạn {upload.max_size_mb}MB")

    try:
        text = extract_document_text(file.filename, data)
    except DocumentExtractionError as e:
        raise ApiError(400, str(e)) from e

    if not text:
        raise ApiError(400, EMPTY_TEXT_MESSAGE)
    resolved_title = resolve_title(text, file.filename, title)
    text = text.strip()
    if len(text) < MIN_TEXT_LENGTH:
        raise ApiError(400, SHORT_TEXT_MESSAGE)
    logger.debug(f"Extracted {len(text)} characters from {file.filename}, title={resolved_title!r}")

    try:
        law = await LawRepository(session).create(build_law(text, resolved_title))
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Failed to store uploaded law {file.filename}: {e}", exc_info=True)
        raise ApiError(500, f"Lỗi khi xử lý file: Lỗi khi lưu vào database: {e}") from e

    logger.info(f"Uploaded law {law.id} ({law.so_hieu}) from {file.filename}")
    log_document_upload(file.filename, len(text), law.id)
    return LawUploadResponse(data=LawUploadData(id=law.id, title=law.title, text_length=len(text)))

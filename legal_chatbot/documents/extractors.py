"""
Text extraction from uploaded files.

Two entry points:

- ``extract_document_text`` for law documents (``.txt``, ``.rtf``, ``.docx``,
  ``.pdf``); failures raise ``DocumentExtractionError`` carrying the message
  shown to the uploader.
- ``extract_attachment_text`` for chat attachments, which never fails and
  returns a bracketed placeholder instead.
"""

from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass
from typing import Dict, Optional

import docx
import pdfplumber

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = (".doc", ".docx", ".pdf", ".txt", ".rtf")
CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")

LEGACY_DOC_MESSAGE = (
    "File .DOC (Word 2003) không thể parse trực tiếp. Vui lòng chuyển sang .DOCX hoặc .TXT, "
    'hoặc sử dụng tab "Upload" với N8N webhook.'
)

MB = 1024 * 1024


class DocumentExtractionError(Exception):
    """The uploaded document could not be turned into text.

    The message is meant for the uploader and is returned as-is.
    """


@dataclass(frozen=True)
class AttachmentType:
    max_size: int
    label: str


SUPPORTED_ATTACHMENT_TYPES: Dict[str, AttachmentType] = {
    "image/jpeg": AttachmentType(10 * MB, "JPEG Image"),
    "image/jpg": AttachmentType(10 * MB, "JPG Image"),
    "image/png": AttachmentType(10 * MB, "PNG Image"),
    "image/webp": AttachmentType(10 * MB, "WebP Image"),
    "application/pdf": AttachmentType(20 * MB, "PDF Document"),
    "text/plain": AttachmentType(5 * MB, "Text File"),
}

IMAGE_PLACEHOLDER = (
    "[Hình ảnh đã được tải lên - OCR sẽ được thực hiện để trích xuất văn bản. \n"
    "Để triển khai OCR đầy đủ, bạn có thể:\n"
    "1. Dùng Tesseract.js cho client-side OCR\n"
    "2. Sử dụng Google Vision API\n"
    "3. Tích hợp dịch vụ OCR khác]\n"
    "\n"
    "Kích thước ảnh: {size} bytes"
)


def has_allowed_extension(file_name: str) -> bool:
    return file_name.lower().endswith(ALLOWED_EXTENSIONS)


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def decode_text(data: bytes) -> str:
    """Decode a plain text (or RTF) upload.

    UTF-8 first (leading BOM removed), latin-1 when the bytes are not valid
    UTF-8. Control characters other than tab and newline are dropped.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        text = data.decode("latin-1")
    if text.startswith("\ufeff"):
        text = text[1:]
    return CONTROL_CHARS.sub("", normalize_newlines(text))


def read_docx(data: bytes) -> str:
    """Raw text of a Word document: paragraphs, then table cells."""
    document = docx.Document(io.BytesIO(data))
    parts = [paragraph.text for paragraph in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            parts.extend(cell.text for cell in row.cells)
    return "\n".join(parts)


def read_pdf(data: bytes) -> str:
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        return "\n".join(page.extract_text() or "" for page in pdf.pages)


def extract_document_text(file_name: str, data: bytes) -> str:
    """Extract the text of a law document upload.

    Args:
        file_name: Original file name, used to pick the parser
        data: File content

    Returns:
        Extracted text with ``\\n`` line endings (may be empty)

    Raises:
        DocumentExtractionError: for ``.doc`` files and unreadable DOCX/PDF files
    """
    name = file_name.lower()

    if name.endswith((".txt", ".rtf")):
        return decode_text(data)

    if name.endswith(".docx"):
        try:
            return normalize_newlines(read_docx(data)).strip()
        except Exception as e:
            logger.error(f"DOCX parse error for {file_name}: {e}")
            raise DocumentExtractionError(f"Không thể đọc file DOCX: {e}. Vui lòng thử chuyển file sang TXT.") from e

    if name.endswith(".doc"):
        raise DocumentExtractionError(LEGACY_DOC_MESSAGE)

    if name.endswith(".pdf"):
        try:
            return normalize_newlines(read_pdf(data)).strip()
        except Exception as e:
            logger.error(f"PDF parse error for {file_name}: {e}")
            raise DocumentExtractionError(f"Không thể đọc file PDF: {e}. Vui lòng thử chuyển file sang TXT.") from e

    raise DocumentExtractionError(f"Chỉ chấp nhận file: {', '.join(ALLOWED_EXTENSIONS)}")


def attachment_type(content_type: Optional[str]) -> Optional[AttachmentType]:
    return SUPPORTED_ATTACHMENT_TYPES.get(content_type or "")


def extract_attachment_text(content_type: str, data: bytes) -> str:
    """Best-effort text of a chat attachment (images are not OCR'd)."""
    if content_type.startswith("image/"):
        return IMAGE_PLACEHOLDER.format(size=len(data))

    if content_type == "application/pdf":
        try:
            return read_pdf(data) or "[Không thể trích xuất văn bản từ PDF]"
        except Exception as e:
            logger.error(f"PDF extraction error: {e}")
            return "[Lỗi khi đọc file PDF]"

    if content_type == "text/plain":
        return data.decode("utf-8", errors="replace")

    return f"[File type {content_type} detected - text extraction not implemented]"

"""Tests for text extraction of uploaded documents and chat attachments."""

import io

import docx
import pytest

from legal_chatbot.documents.extractors import (
    LEGACY_DOC_MESSAGE,
    MB,
    DocumentExtractionError,
    attachment_type,
    decode_text,
    extract_attachment_text,
    extract_document_text,
    has_allowed_extension,
)


def _docx_bytes() -> bytes:
    document = docx.Document()
    document.add_paragraph("QUYẾT ĐỊNH")
    document.add_paragraph("Điều 1. Phạm vi điều chỉnh")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Ô một"
    table.rows[0].cells[1].text = "Ô hai"
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


@pytest.mark.parametrize(
    "file_name,expected",
    [("luat.DOCX", True), ("a.pdf", True), ("b.txt", True), ("c.rtf", True), ("d.doc", True), ("e.exe", False)],
)
def test_has_allowed_extension(file_name, expected):
    assert has_allowed_extension(file_name) is expected


class TestDecodeText:
    def test_utf8_with_bom_and_control_chars(self):
        data = "\ufeffxin chào\r\nbạn\x00\tnhé\rcuối".encode("utf-8")

        assert decode_text(data) == "xin chào\nbạn\tnhé\ncuối"

    def test_latin1_fallback(self):
        assert decode_text(b"caf\xe9") == "café"


class TestExtractDocumentText:
    def test_txt(self):
        assert extract_document_text("luat.txt", "Luật Đất đai\r\n2024".encode("utf-8")) == "Luật Đất đai\n2024"

    def test_docx_paragraphs_and_tables(self):
        text = extract_document_text("luat.docx", _docx_bytes())

        assert "QUYẾT ĐỊNH" in text
        assert "Điều 1. Phạm vi điều chỉnh" in text
        assert "Ô một" in text
        assert "Ô hai" in text

    def test_corrupt_docx(self):
        with pytest.raises(DocumentExtractionError, match="Không thể đọc file DOCX"):
            extract_document_text("hong.docx", b"not a zip archive")

    def test_corrupt_pdf(self):
        with pytest.raises(DocumentExtractionError, match="Không thể đọc file PDF"):
            extract_document_text("hong.pdf", b"not a pdf")

    def test_legacy_doc(self):
        with pytest.raises(DocumentExtractionError) as exc_info:
            extract_document_text("cu.doc", b"\xd0\xcf\x11\xe0")

        assert str(exc_info.value) == LEGACY_DOC_MESSAGE

    def test_unsupported_extension(self):
        with pytest.raises(DocumentExtractionError) as exc_info:
            extract_document_text("virus.exe", b"MZ")

        assert str(exc_info.value) == "Chỉ chấp nhận file: .doc, .docx, .pdf, .txt, .rtf"


class TestAttachments:
    def test_supported_types(self):
        assert attachment_type("image/png").max_size == 10 * MB
        assert attachment_type("application/pdf").max_size == 20 * MB
        assert attachment_type("text/plain").label == "Text File"
        assert attachment_type("application/zip") is None
        assert attachment_type(None) is None

    def test_image_placeholder(self):
        text = extract_attachment_text("image/jpeg", b"\xff\xd8\xff" * 10)

        assert text.startswith("[Hình ảnh đã được tải lên")
        assert text.endswith("Kích thước ảnh: 30 bytes")

    def test_plain_text(self):
        assert extract_attachment_text("text/plain", "nội dung".encode("utf-8")) == "nội dung"

    def test_plain_text_invalid_bytes_replaced(self):
        assert extract_attachment_text("text/plain", b"ok\xff") == "ok\ufffd"

    def test_broken_pdf(self):
        assert extract_attachment_text("application/pdf", b"garbage") == "[Lỗi khi đọc file PDF]"

    def test_unknown_type(self):
        assert (
            extract_attachment_text("application/zip", b"PK")
            == "[File type application/zip detected - text extraction not implemented]"
        )

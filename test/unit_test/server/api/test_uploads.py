"""
Tests for the upload endpoints: law documents and chat attachments.
"""

from unittest.mock import patch

import pytest

from legal_chatbot.core.database.entities.laws import Law
from legal_chatbot.documents.extractors import LEGACY_DOC_MESSAGE
from legal_chatbot.server.api.laws import SHORT_TEXT_MESSAGE

pytestmark = pytest.mark.asyncio

LAW_URL = "/api/laws/upload-word"
ATTACHMENT_URL = "/api/chat/upload-file"

DECISION_TEXT = (
    "ỦY BAN NHÂN DÂN\n"
    "TỈNH BÌNH DƯƠNG\n"
    "Số: 25/2017/QĐ-UBND\n"
    "Bình Dương, ngày 15 tháng 3 năm 2017\n"
    "QUYẾT ĐỊNH\n"
    "Về việc ban hành quy chế quản lý chất thải rắn\n"
    "Điều 1. Ban hành kèm theo Quyết định này quy chế quản lý chất thải rắn trên địa bàn tỉnh.\n"
)


class TestLawUpload:
    async def test_text_document_is_stored(self, client, session):
        files = {"file": ("quyet-dinh.txt", DECISION_TEXT.encode("utf-8"), "text/plain")}

        response = await client.post(LAW_URL, files=files)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Upload thành công"
        law = await session.get(Law, body["data"]["id"])
        assert law is not None
        assert law.so_hieu == "25/2017/QĐ-UBND"
        assert law.noi_dung == DECISION_TEXT.strip()
        assert body["data"]["text_length"] == len(DECISION_TEXT.strip())

    async def test_explicit_title_wins(self, client):
        files = {"file": ("quyet-dinh.txt", DECISION_TEXT.encode("utf-8"), "text/plain")}

        response = await client.post(LAW_URL, files=files, data={"title": "Quy chế chất thải"})

        assert response.json()["data"]["title"] == "Quy chế chất thải"

    async def test_no_file(self, client):
        response = await client.post(LAW_URL, data={"title": "x"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Không có file được upload"}

    async def test_unsupported_extension(self, client):
        response = await client.post(LAW_URL, files={"file": ("law.odt", b"content", "application/octet-stream")})

        assert response.status_code == 400
        assert response.json()["error"].startswith("Chỉ chấp nhận file:")

    async def test_legacy_word_document(self, client):
        response = await client.post(LAW_URL, files={"file": ("law.doc", b"\xd0\xcf\x11\xe0", "application/msword")})

        assert response.status_code == 400
        assert response.json()["error"] == LEGACY_DOC_MESSAGE

    async def test_short_text(self, client):
        response = await client.post(LAW_URL, files={"file": ("short.txt", b"  ngan  ", "text/plain")})

        assert response.status_code == 400
        assert response.json()["error"] == SHORT_TEXT_MESSAGE

    async def test_size_limit(self, client):
        with patch("legal_chatbot.server.api.laws.settings") as mock_settings:
            mock_settings.upload.max_size_bytes = 16
            mock_settings.upload.max_size_mb = 1
            response = await client.post(LAW_URL, files={"file": ("big.txt", b"x" * 32, "text/plain")})

        assert response.status_code == 400
        assert response.json()["error"] == "File vượt quá giới hạn 1MB"


class TestChatAttachment:
    async def test_text_attachment(self, client):
        files = {"file": ("note.txt", "Nội dung ghi chú".encode("utf-8"), "text/plain")}

        response = await client.post(ATTACHMENT_URL, files=files)

        assert response.status_code == 200
        body = response.json()
        assert body["fileName"] == "note.txt"
        assert body["fileType"] == "text/plain"
        assert body["extractedText"] == "Nội dung ghi chú"
        assert body["fileSize"] == len("Nội dung ghi chú".encode("utf-8"))

    async def test_image_attachment_gets_placeholder(self, client):
        response = await client.post(ATTACHMENT_URL, files={"file": ("scan.png", b"\x89PNG0000", "image/png")})

        assert response.status_code == 200
        assert "Kích thước ảnh: 8 bytes" in response.json()["extractedText"]

    async def test_unsupported_type(self, client):
        response = await client.post(ATTACHMENT_URL, files={"file": ("a.zip", b"PK", "application/zip")})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Unsupported file type: application/zip"
        assert "image/png" in body["supportedTypes"]

    async def test_too_large(self, client):
        data = b"x" * (5 * 1024 * 1024 + 1)

        response = await client.post(ATTACHMENT_URL, files={"file": ("big.txt", data, "text/plain")})

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "File size exceeds limit of 5MB",
            "maxSize": 5 * 1024 * 1024,
        }

    async def test_no_file(self, client):
        response = await client.post(ATTACHMENT_URL)

        assert response.status_code == 400
        assert response.json()["error"] == "No file provided"

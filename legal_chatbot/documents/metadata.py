"""
Metadata extraction for uploaded Vietnamese legal documents.

Vietnamese legal documents follow a fairly rigid layout: issuing body and
national motto at the top, ``Số: 25/2017/QĐ-UBND`` and the place/date line,
the document type in capitals, the body, and the signer at the bottom. The
regular expressions below pick those parts out of the plain text; every
field is optional except the document number and issue date, which fall back
to generated values.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass
from datetime import date
from pathlib import PurePath
from typing import List, Optional, Sequence

from legal_chatbot.core.database.entities.laws import Law

DEFAULT_DOCUMENT_TYPE = "Văn bản upload"
TITLE_SCAN_LINES = 50
SIGNER_SCAN_LINES = 20

LAW_TITLE_KEYWORDS = (
    "QUYẾT ĐỊNH",
    "NGHỊ ĐỊNH",
    "LUẬT",
    "KẾ HOẠCH",
    "THÔNG TƯ",
    "NGHỊ QUYẾT",
    "CHỈ THỊ",
    "PHÁP LỆNH",
    "LỆNH",
    "THÔNG BÁO",
    "CÔNG VĂN",
    "QUYẾT ĐỊNH SỐ",
    "NGHỊ ĐỊNH SỐ",
    "THÔNG TƯ SỐ",
    "NGHỊ QUYẾT SỐ",
)
LAW_NUMBER_PATTERN = re.compile(r"\d{1,4}/\d{4}/(QĐ|NĐ|TT|NQ|KH|CT|PL|L)-[A-Z]+")
NUMBER_YEAR_PATTERN = re.compile(r"\d{1,4}/\d{4}")
LETTER_PATTERN = re.compile(r"[a-zA-ZÀ-ỹ]")
ONLY_SYMBOLS_PATTERN = re.compile(r"^[^\wÀ-ỹ]*$", re.ASCII)

SO_HIEU_PATTERNS = (
    re.compile(r"Số:\s*(\d{1,5}/[A-Z]{2,10}-[A-Z0-9]{2,10})", re.IGNORECASE),
    re.compile(r"Số\s+(\d{1,5}/[A-Z]{2,10}-[A-Z0-9]{2,10})", re.IGNORECASE),
    re.compile(r"\d{1,5}/\d{4}/(?:QĐ|NĐ|TT|NQ|KH|CT|PL|L|TB|CV)-[A-Z0-9 ]+", re.IGNORECASE),
    re.compile(r"\d{1,5}/(?:QĐ|NĐ|TT|NQ|KH|CT|PL|L|TB|CV)-[A-Z0-9 ]+", re.IGNORECASE),
    re.compile(r"\d{1,5}/[A-Z]{2,10}-[A-Z0-9]{2,10}", re.IGNORECASE),
)
SO_HIEU_PREFIX_PATTERN = re.compile(r"SỐ:\s*|SỐ\s+", re.IGNORECASE)
MAX_SO_HIEU_LENGTH = 50

DOCUMENT_TYPE_PATTERNS = tuple(
    re.compile(name, re.IGNORECASE)
    for name in (
        "QUYẾT ĐỊNH",
        "NGHỊ ĐỊNH",
        "THÔNG TƯ",
        "NGHỊ QUYẾT",
        "LUẬT",
        "KẾ HOẠCH",
        "CHỈ THỊ",
        "PHÁP LỆNH",
        "LỆNH",
        "THÔNG BÁO",
        "CÔNG VĂN",
    )
)

# (day, month, year) groups
ISSUE_DATE_PATTERNS = (
    re.compile(
        r"(?:Hà\s+Nội|nơi\s+ban\s+hành)[,\s]+ngày\s+(\d{1,2})\s+tháng\s+(\d{1,2})\s+năm\s+(\d{4})", re.IGNORECASE
    ),
    re.compile(r"ngày\s+(\d{1,2})\s+tháng\s+(\d{1,2})\s+năm\s+(\d{4})", re.IGNORECASE),
    re.compile(r"(?:ngày|Hà\s+Nội)[,\s]+(\d{1,2})/(\d{1,2})/(\d{4})", re.IGNORECASE),
    re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})"),
)
GAZETTE_DATE_PATTERN = re.compile(
    r"(?:ngày\s+công\s+báo|công\s+báo\s+ngày)[:\s]+(\d{1,2})/(\d{1,2})/(\d{4})", re.IGNORECASE
)
EFFECTIVE_DATE_PATTERNS = (
    re.compile(
        r"(?:có\s+hiệu\s+lực\s+từ\s+ngày|hiệu\s+lực\s+từ\s+ngày)[:\s]+(\d{1,2})\s+tháng\s+(\d{1,2})\s+năm\s+(\d{4})",
        re.IGNORECASE,
    ),
    re.compile(r"(?:có\s+hiệu\s+lực\s+từ\s+ngày|hiệu\s+lực)[:\s]+(\d{1,2})/(\d{1,2})/(\d{4})", re.IGNORECASE),
    re.compile(r"(?:hiệu\s+lực\s+từ)\s+(\d{1,2})\s+tháng\s+(\d{1,2})\s+năm\s+(\d{4})", re.IGNORECASE),
    re.compile(
        r"(?:có\s+hiệu\s+lực\s+kể\s+từ\s+ngày)[:\s]+(\d{1,2})\s+tháng\s+(\d{1,2})\s+năm\s+(\d{4})", re.IGNORECASE
    ),
)
EFFECTIVE_ON_ISSUE_PATTERN = re.compile(
    r"(?:có\s+hiệu\s+lực|có\s+hiệu\s+lực\s+kể\s+từ)\s+ngày\s+ban\s+hành", re.IGNORECASE
)
EFFECTIVE_FROM_PATTERN = re.compile(r"(?:có\s+hiệu\s+lực\s+kể\s+từ|hiệu\s+lực\s+kể\s+từ)\s+ngày", re.IGNORECASE)
MIN_YEAR, MAX_YEAR = 1900, 2100

SIGNER_PATTERNS = (
    re.compile(
        r"(?:KT\.|KT\s+)?(?:TỔNG\s+CỤC\s+TRƯỞNG|THỐNG\s+ĐỐC|BỘ\s+TRƯỞNG|CHỦ\s+TỊCH|GIÁM\s+ĐỐC|TRƯỞNG\s+BAN"
        r"|PHÓ\s+TỔNG\s+CỤC\s+TRƯỞNG)[\s\S]{0,300}([A-ZÀ-Ỹ\s]{8,50})\s*$",
        re.MULTILINE,
    ),
    re.compile(r"([A-ZÀ-Ỹ][a-zà-ỹ]+\s+[A-ZÀ-Ỹ][a-zà-ỹ]+\s+[A-ZÀ-Ỹ][a-zà-ỹ]+)\s*$", re.MULTILINE),
    re.compile(r"([A-ZÀ-Ỹ\s]{10,50})(?:\s*\n\s*){0,3}$", re.MULTILINE),
)
SIGNER_TITLE_PATTERN = re.compile(
    r"(?:KT\.|TỔNG\s+CỤC\s+TRƯỞNG|THỐNG\s+ĐỐC|BỘ\s+TRƯỞNG|CHỦ\s+TỊCH|GIÁM\s+ĐỐC|PHÓ\s+TỔNG\s+CỤC\s+TRƯỞNG)\s*",
    re.IGNORECASE,
)
LOWERCASE_PATTERN = re.compile(r"[a-zà-ỹ]")

ISSUER_PATTERNS = (
    re.compile(
        r"(?:BỘ\s+[A-ZÀ-Ỹ\s]{5,40}|TỔNG\s+CỤC\s+[A-ZÀ-Ỹ\s]{5,40}"
        r"|UBND\s+(?:TỈNH|THÀNH\s+PHỐ|HUYỆN|XÃ)\s+[A-ZÀ-Ỹ\s]{5,40})",
        re.IGNORECASE,
    ),
    re.compile(
        r"^(?:CỘNG\s+HÒA[\s\S]{0,150})?(?:BỘ\s+[A-ZÀ-Ỹ\s]+[\s\S]{0,20})?([A-ZÀ-Ỹ\s]{8,60})(?:[\s\S]{0,30}?)"
        r"(?:Số\s*:|QUYẾT\s+ĐỊNH|NGHỊ\s+ĐỊNH|THÔNG\s+TƯ|THÔNG\s+BÁO)",
        re.IGNORECASE,
    ),
    re.compile(r"([A-ZÀ-Ỹ\s]{10,60})(?:,\s+ngày|\s+Số\s*:)", re.IGNORECASE),
)
ISSUER_EXCLUDED_WORDS = ("ĐỘC LẬP", "TỰ DO", "HẠNH PHÚC")
ISSUER_EXCLUDED_PREFIX = re.compile(r"^(?:CỘNG\s+HÒA|XÃ\s+HỘI)")
ISSUER_AGENCY_PREFIX = re.compile(r"^(?:BỘ|TỔNG\s+CỤC|UBND|CỤC|CHI\s+CỤC)", re.IGNORECASE)
MAX_ISSUER_LENGTH = 100

GAZETTE_NUMBER_PATTERN = re.compile(r"(?:số\s+công\s+báo|công\s+báo\s+số)[:\s]+([\d/\-]+)", re.IGNORECASE)

STATUS_EXPIRED = "Hết hiệu lực"
STATUS_AMENDED = "Đã sửa đổi"
STATUS_IN_FORCE = "Còn hiệu lực"
EXPIRED_PATTERN = re.compile(r"(?:hết|đã\s+hết|không\s+còn)\s+hiệu\s+lực", re.IGNORECASE)
AMENDED_PATTERN = re.compile(r"(?:sửa\s+đổi|được\s+sửa|đã\s+sửa)", re.IGNORECASE)

REFERENCED_DOCUMENTS_PATTERN = re.compile(r"(?:văn\s+bản|căn\s+cứ)[:\s]+([A-Z\d\s/\-.,]{20,200})", re.IGNORECASE)
MAX_REFERENCED_LENGTH = 200

CATEGORY_KEYWORDS = {
    "Xuat-nhap-khau": ("xuất khẩu", "nhập khẩu", "hải quan", "hàng hóa xuất", "hàng hóa nhập"),
    "Xay-dung": ("xây dựng", "công trình", "kiến trúc"),
    "Tai-chinh": ("tài chính", "ngân sách", "thuế"),
    "Lao-dong": ("lao động", "tiền lương", "bảo hiểm"),
    "Giao-thong": ("giao thông", "vận tải", "đường bộ"),
}

SUMMARY_MIN_LINE = 50
SUMMARY_LENGTH = 250
SUMMARY_FALLBACK_LENGTH = 200


def is_valid_title(line: str) -> bool:
    """A 3-200 character line containing letters or digits, not just symbols."""
    trimmed = line.strip()
    if not trimmed or len(trimmed) < 3 or len(trimmed) > 200:
        return False
    if not LETTER_PATTERN.search(trimmed) and not re.search(r"\d", trimmed):
        return False
    if len(trimmed) < 5 and ONLY_SYMBOLS_PATTERN.match(re.sub(r"\s", "", trimmed)):
        return False
    return True


def is_law_document_title(line: str) -> bool:
    upper = line.strip().upper()
    if any(keyword in upper for keyword in LAW_TITLE_KEYWORDS):
        return True
    return LAW_NUMBER_PATTERN.search(upper) is not None


def find_best_title(lines: Sequence[str]) -> str:
    """Pick the document title from the first lines of the text.

    Lines naming a document type (or carrying a document number) win, the
    ones with a ``n/yyyy`` number and a reasonable length first. Otherwise the
    first valid line of 20-150 characters, else the first valid line.
    """
    best_title = ""
    best_score = 0
    for line in lines:
        if is_valid_title(line) and is_law_document_title(line):
            trimmed = line.strip()
            score = 10
            if NUMBER_YEAR_PATTERN.search(trimmed):
                score += 5
            if 20 < len(trimmed) < 150:
                score += 3
            if score > best_score:
                best_score = score
                best_title = trimmed
    if best_title:
        return best_title

    for line in lines:
        if is_valid_title(line):
            trimmed = line.strip()
            if 20 <= len(trimmed) <= 150:
                return trimmed
            if not best_title:
                best_title = trimmed
    return best_title


def resolve_title(text: str, file_name: str, user_title: Optional[str] = None) -> str:
    """Title given by the uploader, else found in the text, else the file name stem."""
    if user_title:
        return user_title
    found = find_best_title(text.split("\n")[:TITLE_SCAN_LINES])
    return found or PurePath(file_name).stem


def _iso_date(day: str, month: str, year: str) -> str:
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


def _plausible_year(year: str) -> bool:
    return MIN_YEAR <= int(year) <= MAX_YEAR


@dataclass
class LawFields:
    """Metadata extracted from a document body."""

    so_hieu: str
    loai_van_ban: str
    ngay_ban_hanh: str
    ngay_cong_bao: Optional[str] = None
    ngay_hieu_luc: Optional[str] = None
    nguoi_ky: Optional[str] = None
    noi_ban_hanh: Optional[str] = None
    so_cong_bao: Optional[str] = None
    tinh_trang: str = STATUS_IN_FORCE
    category: Optional[str] = None
    tom_tat: str = ""
    van_ban_duoc_dan: Optional[str] = None


def extract_document_number(text: str) -> Optional[str]:
    for pattern in SO_HIEU_PATTERNS:
        match = pattern.search(text)
        if match:
            number = match.group(1) if pattern.groups else match.group(0)
            number = SO_HIEU_PREFIX_PATTERN.sub("", number, count=1).strip()
            if number:
                return number[:MAX_SO_HIEU_LENGTH]
    return None


def extract_document_type(title: str) -> str:
    for pattern in DOCUMENT_TYPE_PATTERNS:
        match = pattern.search(title)
        if match:
            return match.group(0)
    return DEFAULT_DOCUMENT_TYPE


def extract_issue_date(text: str) -> Optional[str]:
    for pattern in ISSUE_DATE_PATTERNS:
        match = pattern.search(text)
        if match and _plausible_year(match.group(3)):
            return _iso_date(*match.groups())
    return None


def extract_gazette_date(text: str) -> Optional[str]:
    match = GAZETTE_DATE_PATTERN.search(text)
    return _iso_date(*match.groups()) if match else None


def extract_effective_date(text: str) -> Optional[str]:
    """Explicit effective date; None when the document takes effect on issue."""
    if EFFECTIVE_ON_ISSUE_PATTERN.search(text):
        return None
    for pattern in EFFECTIVE_DATE_PATTERNS:
        match = pattern.search(text)
        if match:
            return _iso_date(*match.groups())
    return None


def extract_signer(lines: List[str]) -> Optional[str]:
    """Signer name from the last lines of the document."""
    tail = "\n".join(lines[-SIGNER_SCAN_LINES:])
    for pattern in SIGNER_PATTERNS:
        match = pattern.search(tail)
        if not match or not match.group(1):
            continue
        candidate = SIGNER_TITLE_PATTERN.sub("", match.group(1).strip()).strip()
        if 5 <= len(candidate) <= 50 and LOWERCASE_PATTERN.search(candidate):
            return candidate
        if 6 <= len(candidate) <= 30 and re.search(r"\s", candidate) and candidate == candidate.upper():
            # NGUYỄN VĂN A -> Nguyễn Văn A
            return " ".join(word.capitalize() for word in candidate.split())
    return None


def extract_issuer(text: str) -> Optional[str]:
    for pattern in ISSUER_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        candidate = (match.group(1) if pattern.groups else match.group(0)).strip()
        if len(candidate) < 8:
            continue
        if any(word in candidate for word in ISSUER_EXCLUDED_WORDS) or ISSUER_EXCLUDED_PREFIX.match(candidate):
            continue
        if ISSUER_AGENCY_PREFIX.match(candidate) or len(candidate) >= 10:
            return candidate[:MAX_ISSUER_LENGTH]
    return None


def extract_gazette_number(text: str) -> Optional[str]:
    match = GAZETTE_NUMBER_PATTERN.search(text)
    return match.group(1).strip() if match else None


def extract_status(text: str) -> str:
    if EXPIRED_PATTERN.search(text):
        status = STATUS_EXPIRED
    elif AMENDED_PATTERN.search(text):
        status = STATUS_AMENDED
    else:
        status = STATUS_IN_FORCE
    if EFFECTIVE_FROM_PATTERN.search(text):
        status = STATUS_IN_FORCE
    return status


def extract_referenced_documents(text: str) -> Optional[str]:
    match = REFERENCED_DOCUMENTS_PATTERN.search(text)
    return match.group(1).strip()[:MAX_REFERENCED_LENGTH] if match else None


def extract_category(text: str, document_type: str) -> Optional[str]:
    """Subject area from keywords, else the document type when one was recognised."""
    lower = text.lower()
    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(keyword in lower for keyword in keywords):
            return category
    return document_type if document_type != DEFAULT_DOCUMENT_TYPE else None


def build_summary(text: str, lines: List[str]) -> str:
    first_paragraph = next((line for line in lines if len(line) > SUMMARY_MIN_LINE), lines[0] if lines else "")
    if first_paragraph:
        suffix = "..." if len(first_paragraph) > SUMMARY_LENGTH else ""
        return first_paragraph[:SUMMARY_LENGTH] + suffix
    suffix = "..." if len(text) > SUMMARY_FALLBACK_LENGTH else ""
    return text[:SUMMARY_FALLBACK_LENGTH] + suffix


def _now_ms() -> int:
    return int(time.time() * 1000)


def extract_law_fields(text: str, title: str) -> LawFields:
    """Extract every metadata field of a document.

    Args:
        text: Full document text
        title: Resolved document title (used for the document type)

    Returns:
        The extracted fields; ``so_hieu`` falls back to ``UPLOAD-<ms>`` and
        ``ngay_ban_hanh`` to today
    """
    lines = [line.strip() for line in text.split("\n")]
    lines = [line for line in lines if line]

    document_type = extract_document_type(title)
    issue_date = extract_issue_date(text)
    effective_date = extract_effective_date(text)
    if effective_date is None and issue_date and EFFECTIVE_FROM_PATTERN.search(text):
        effective_date = issue_date

    return LawFields(
        so_hieu=extract_document_number(text) or f"UPLOAD-{_now_ms()}",
        loai_van_ban=document_type,
        ngay_ban_hanh=issue_date or date.today().isoformat(),
        ngay_cong_bao=extract_gazette_date(text),
        ngay_hieu_luc=effective_date,
        nguoi_ky=extract_signer(lines),
        noi_ban_hanh=extract_issuer(text),
        so_cong_bao=extract_gazette_number(text),
        tinh_trang=extract_status(text),
        category=extract_category(text, document_type),
        tom_tat=build_summary(text, lines),
        van_ban_duoc_dan=extract_referenced_documents(text),
    )


def build_law(text: str, title: str) -> Law:
    """Build the ``laws`` row for an uploaded document (not yet persisted)."""
    fields = extract_law_fields(text, title)
    return Law(
        external_id=f"upload-{_now_ms()}",
        title=title,
        so_hieu=fields.so_hieu,
        loai_van_ban=fields.loai_van_ban,
        noi_ban_hanh=fields.noi_ban_hanh,
        ngay_ban_hanh=fields.ngay_ban_hanh,
        ngay_cong_bao=fields.ngay_cong_bao,
        ngay_hieu_luc=fields.ngay_hieu_luc,
        nguoi_ky=fields.nguoi_ky,
        noi_dung=text,
        noi_dung_html=text.replace("\n", "<br>"),
        so_cong_bao=fields.so_cong_bao,
        tinh_trang=fields.tinh_trang,
        tom_tat=fields.tom_tat,
        tom_tat_html=fields.tom_tat.replace("\n", "<br>"),
        category=fields.category,
        van_ban_duoc_dan=fields.van_ban_duoc_dan,
    )

"""
Rule-based query classifier.

Decides, with regular expressions and keyword lists only, what kind of chat
message the user sent:

- a bare greeting ("chào bạn", "hi"),
- a follow-up on the previous assistant answer ("tóm lại", "cần làm gì"),
- a legal-domain question (keyword list or a document number such as
  ``25/2017/QĐ-UBND``),
- an explicit request for citations/source links,
- a request to summarize.

The rules are evaluated independently; callers apply them in a fixed order
(follow-up, greeting, delegation, local search) and the first match wins.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

GREETING_PATTERNS = (
    re.compile(
        r"(hello|hi|hey|chào|chào bạn|chào anh|chào chị|chào em|xin chào"
        r"|chào buổi sáng|chào buổi chiều|chào buổi tối)"
    ),
    re.compile(r"(hế lô|hê lô|hê lô bạn|hế lô bạn)"),
    re.compile(r"(good morning|good afternoon|good evening)"),
    re.compile(r"(chào|hi|hello)\s*[!?.]*"),
)

SOURCE_REQUEST_PATTERNS = (
    re.compile(
        r"(trích|nguồn|tham khảo|dẫn chứng|chứng minh|theo luật|căn cứ|theo quy định|theo điều|theo khoản)",
        re.IGNORECASE,
    ),
    re.compile(r"(luật nào|quy định nào|điều nào|khoản nào|văn bản nào)", re.IGNORECASE),
    re.compile(r"(cho tôi biết|hãy cho|gửi|gửi cho|trích dẫn|liệt kê)", re.IGNORECASE),
)

LEGAL_KEYWORDS = (
    "luật", "pháp luật", "pháp lý", "quy định", "nghị định", "thông tư",
    "quyết định", "văn bản pháp luật", "điều luật", "khoản", "điều",
    "luật sư", "tư vấn pháp luật", "tranh chấp", "hợp đồng", "thỏa thuận",
    "quyền", "nghĩa vụ", "trách nhiệm", "vi phạm", "xử phạt", "phạt",
    "tòa án", "tòa", "kiện", "khởi kiện", "bồi thường", "thiệt hại",
    "pháp nhân", "cá nhân", "doanh nghiệp", "công ty", "thành lập",
    "giấy phép", "đăng ký", "thủ tục", "hành chính", "dân sự", "hình sự",
    "lao động", "thuế", "bảo hiểm", "sở hữu", "tài sản", "thừa kế",
    "hôn nhân", "gia đình", "ly hôn", "con cái", "nuôi dưỡng",
    # Logistics and transport
    "logistics", "vận chuyển", "vận tải", "giao hàng", "vận chuyển hàng hóa",
    "vận tải hàng hóa", "vận tải biển", "vận tải đường bộ", "vận tải đường sắt",
    "vận tải hàng không", "kho bãi", "lưu kho", "bảo quản hàng hóa",
    # Smuggling and trade fraud
    "buôn lậu", "hàng lậu", "lậu", "gian lận thương mại", "hàng giả",
    "vận chuyển trái phép", "nhập khẩu trái phép", "xuất khẩu trái phép",
    # Customs
    "hải quan", "thuế quan", "thuế nhập khẩu", "thuế xuất khẩu", "kiểm tra hải quan",
    # English
    "law", "legal", "regulation", "decree", "circular", "decision",
    "contract", "dispute", "court", "lawsuit", "compensation",
    "transport", "shipping", "smuggling", "customs",
)

# e.g. 25/2017/QĐ-UBND, 01/2024/NĐ-CP
LAW_NUMBER_PATTERN = re.compile(r"\d{1,4}/\d{4}/(QĐ|NĐ|TT|NQ|KH|CT|PL|L)-[A-Z]+", re.IGNORECASE)

FOLLOW_UP_PATTERNS = (
    re.compile(r"^(tóm lại|tổng kết|kết luận|tóm tắt|tổng hợp|vậy|thì|vậy thì)", re.IGNORECASE),
    re.compile(r"(làm gì|phải làm|nên làm|cần làm|bước tiếp theo|tiếp theo)", re.IGNORECASE),
    re.compile(r"(giải thích|nói rõ|chi tiết|thêm|nữa)", re.IGNORECASE),
    re.compile(r"(còn gì|gì nữa|khác)", re.IGNORECASE),
    re.compile(r"^(ok|okay|được|hiểu|rồi)", re.IGNORECASE),
)
FOLLOW_UP_NO_ACCENT_PATTERN = re.compile(r"(tom lai|tong ket|ket luan|tom tat|tong hop|tiep theo)", re.IGNORECASE)
SHORT_FOLLOW_UP_LENGTH = 50

SUMMARY_PATTERN = re.compile(r"(tóm tắt|tổng hợp)", re.IGNORECASE)
SUMMARY_NO_ACCENT_PATTERN = re.compile(r"(tom tat|tong hop)", re.IGNORECASE)


def remove_diacritics(text: str) -> str:
    """Strip Vietnamese diacritics: ``"Tóm tắt đi"`` -> ``"Tom tat di"``."""
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.replace("đ", "d").replace("Đ", "D")


def is_simple_greeting(query: str) -> bool:
    normalized = query.lower().strip()
    return any(pattern.fullmatch(normalized) for pattern in GREETING_PATTERNS)


def has_explicit_source_request(query: str) -> bool:
    """True when the user asks for citations, the governing law, or a list of documents."""
    normalized = query.lower().strip()
    return any(pattern.search(normalized) for pattern in SOURCE_REQUEST_PATTERNS)


def is_legal_related_query(query: str) -> bool:
    """True when the query mentions a legal keyword or contains a document number."""
    normalized = query.lower().strip()
    if any(keyword in normalized for keyword in LEGAL_KEYWORDS):
        return True
    return LAW_NUMBER_PATTERN.search(query) is not None


def is_follow_up_question(query: str, previous_messages: Sequence[Any]) -> bool:
    """True when the query refers back to the conversation.

    Either a discourse marker matches (with or without diacritics) or the
    query is short and there is conversation history.
    """
    normalized = query.lower().strip()
    if any(pattern.search(normalized) for pattern in FOLLOW_UP_PATTERNS):
        return True
    if FOLLOW_UP_NO_ACCENT_PATTERN.search(remove_diacritics(normalized)):
        return True
    return len(normalized) < SHORT_FOLLOW_UP_LENGTH and len(previous_messages) > 0


def wants_summary(query: str) -> bool:
    return bool(SUMMARY_PATTERN.search(query) or SUMMARY_NO_ACCENT_PATTERN.search(remove_diacritics(query)))


@dataclass(frozen=True)
class QueryClassification:
    """All classifier verdicts for one query."""

    is_greeting: bool
    is_follow_up: bool
    is_legal: bool
    explicit_source_request: bool
    wants_summary: bool


def classify_query(query: str, previous_messages: Sequence[Mapping[str, Any]] = ()) -> QueryClassification:
    """Run every rule against ``query`` and its conversation history."""
    return QueryClassification(
        is_greeting=is_simple_greeting(query),
        is_follow_up=is_follow_up_question(query, previous_messages),
        is_legal=is_legal_related_query(query),
        explicit_source_request=has_explicit_source_request(query),
        wants_summary=wants_summary(query),
    )

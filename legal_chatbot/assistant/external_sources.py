"""
Static catalogue of well-known legal documents from public portals.

Used when the local ``laws`` table has nothing relevant: the whole query is
matched (case-insensitive substring) against title, summary and article
reference of each entry, at most ``PER_CATALOGUE_LIMIT`` hits per portal.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from legal_chatbot.core.models.io.chat import LawSource

PER_CATALOGUE_LIMIT = 3
EXTERNAL_CATEGORY = "External Source"


@dataclass(frozen=True)
class CatalogueEntry:
    id: str
    title: str
    content: str
    article_reference: str
    source: str
    category: str

    def matches(self, needle: str) -> bool:
        return (
            needle in self.title.lower()
            or needle in self.content.lower()
            or needle in self.article_reference.lower()
        )

    def to_source(self) -> LawSource:
        return LawSource(
            id=self.id,
            title=self.title,
            article_reference=self.article_reference,
            source=self.source,
            link=self.source,
            category=self.category or EXTERNAL_CATEGORY,
        )


THUVIENPHAPLUAT: Tuple[CatalogueEntry, ...] = (
    CatalogueEntry(
        id="tvpl_001",
        title="Luật Ngân hàng Nhà nước Việt Nam số 46/2010/QH12",
        content=(
            "Luật này quy định về tổ chức và hoạt động của Ngân hàng Nhà nước Việt Nam, chức năng, nhiệm vụ, "
            "quyền hạn của Ngân hàng Nhà nước trong việc quản lý nhà nước về tiền tệ và hoạt động ngân hàng."
        ),
        article_reference="Điều 1, Điều 2, Điều 3",
        source=(
            "https://thuvienphapluat.vn/van-ban/Ngan-hang/"
            "Luat-Ngan-hang-Nha-nuoc-Viet-Nam-2010-46-2010-QH12-110728.aspx"
        ),
        category="Ngân hàng",
    ),
    CatalogueEntry(
        id="tvpl_002",
        title="Nghị định 01/2024/NĐ-CP về quy định chi tiết thi hành Luật Các tổ chức tín dụng",
        content=(
            "Nghị định này quy định chi tiết thi hành một số điều của Luật Các tổ chức tín dụng số 32/2024/QH15 "
            "về điều kiện, thủ tục cấp, sửa đổi, bổ sung, thu hồi giấy phép thành lập và hoạt động của tổ chức "
            "tín dụng."
        ),
        article_reference="Điều 6, Điều 7, Điều 8",
        source=(
            "https://thuvienphapluat.vn/van-ban/Ngan-hang/Nghi-dinh-01-2024-ND-CP-quy-dinh-chi-tiet-thi-hanh-"
            "Luat-Cac-to-chuc-tin-dung-2024-01-2024-ND-CP-678123.aspx"
        ),
        category="Ngân hàng",
    ),
)

VANBAN_CHINHPHU: Tuple[CatalogueEntry, ...] = (
    CatalogueEntry(
        id="vbcp_001",
        title="Nghị định 15/2024/NĐ-CP về quy định chi tiết thi hành một số điều của Luật Ngân hàng Nhà nước Việt Nam",
        content=(
            "Nghị định này quy định chi tiết thi hành một số điều của Luật Ngân hàng Nhà nước Việt Nam số "
            "46/2010/QH12 về chức năng, nhiệm vụ, quyền hạn của Ngân hàng Nhà nước Việt Nam trong việc quản lý "
            "nhà nước về tiền tệ và hoạt động ngân hàng."
        ),
        article_reference="Điều 1, Điều 2, Điều 3",
        source=(
            "https://vanban.chinhphu.vn/portal/page/portal/chinhphu/hethongvanban"
            "?class_id=1&mode=detail&document_id=200000"
        ),
        category="Tài chính - Ngân hàng",
    ),
    CatalogueEntry(
        id="vbcp_002",
        title="Luật Các tổ chức tín dụng số 32/2024/QH15",
        content=(
            "Luật này quy định về tổ chức và hoạt động của các tổ chức tín dụng; quyền và nghĩa vụ của các tổ "
            "chức tín dụng, chi nhánh ngân hàng nước ngoài, văn phòng đại diện của tổ chức tín dụng nước ngoài, "
            "tổ chức nước ngoài khác có hoạt động ngân hàng tại Việt Nam."
        ),
        article_reference="Điều 1, Điều 2, Điều 3, Điều 4",
        source=(
            "https://vanban.chinhphu.vn/portal/page/portal/chinhphu/hethongvanban"
            "?class_id=1&mode=detail&document_id=200002"
        ),
        category="Tài chính - Ngân hàng",
    ),
)

CATALOGUES: Dict[str, Tuple[CatalogueEntry, ...]] = {
    "thuvienphapluat.vn": THUVIENPHAPLUAT,
    "vanban.chinhphu.vn": VANBAN_CHINHPHU,
}


def search_external_sources(query: str, limit: int = PER_CATALOGUE_LIMIT) -> List[CatalogueEntry]:
    """Entries of every catalogue containing ``query``, at most ``limit`` per catalogue."""
    needle = query.lower()
    results: List[CatalogueEntry] = []
    for entries in CATALOGUES.values():
        results.extend([entry for entry in entries if entry.matches(needle)][:limit])
    return results

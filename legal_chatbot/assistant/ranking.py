"""
Keyword scoring and ranking for the local law search.

The database only returns a coarse candidate set (any term in title or body);
the relevance decision is made here:

+10  whole search text appears in the title
 +5  per search term found in the title
 +8  whole search text appears in the document number (so_hieu)
 +2  whole search text appears in the body
 +1  per search term found in the body

Rows scoring below ``MIN_SCORE`` are dropped, the rest are sorted by score
(ties keep database order) and the best ``MAX_RESULTS`` are kept.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Sequence
from urllib.parse import quote

from legal_chatbot.core.database.entities.laws import Law
from legal_chatbot.core.models.io.chat import LawSource

MIN_SCORE = 3
MAX_RESULTS = 5
HISTORY_TURNS = 10
MIN_TERM_LENGTH = 3

DEFAULT_TITLE = "Văn bản pháp luật"
LOCAL_CATEGORY = "Local Database"
TVPL_SEARCH_URL = "https://thuvienphapluat.vn/van-ban/tim-kiem?keyword={keyword}"


@dataclass(frozen=True)
class RankedLaw:
    law: Law
    score: int


def build_search_base(query: str, previous_messages: Sequence[Mapping[str, Any]] = ()) -> str:
    """Join the last ten user turns and the current query into one search text."""
    user_texts = [str(m.get("content", "")) for m in previous_messages if m.get("role") == "user"]
    recent = " ".join(user_texts[-HISTORY_TURNS:])
    return f"{recent} {query}" if recent else query


def tokenize(search_base: str) -> List[str]:
    """Lower-cased whitespace tokens longer than two characters."""
    return [word for word in search_base.lower().split() if len(word) >= MIN_TERM_LENGTH]


def score_law(law: Law, phrase: str, terms: Iterable[str]) -> int:
    """Relevance score of one law for a lower-cased ``phrase`` and its ``terms``."""
    title = (law.title or "").lower()
    content = (law.noi_dung or "").lower()
    so_hieu = (law.so_hieu or "").lower()
    terms = list(terms)

    score = 0
    if phrase in title:
        score += 10
    score += 5 * sum(1 for term in terms if term in title)
    if phrase in so_hieu:
        score += 8
    if phrase in content:
        score += 2
    score += sum(1 for term in terms if term in content)
    return score


def rank_laws(laws: Iterable[Law], phrase: str, terms: Sequence[str]) -> List[RankedLaw]:
    """Score, filter (``>= MIN_SCORE``) and order candidates, keeping the top ``MAX_RESULTS``."""
    scored = [RankedLaw(law=law, score=score_law(law, phrase, terms)) for law in laws]
    relevant = [item for item in scored if item.score >= MIN_SCORE]
    relevant.sort(key=lambda item: item.score, reverse=True)
    return relevant[:MAX_RESULTS]


def build_law_link(law: Law) -> Optional[str]:
    """Direct link of a law, falling back to a thuvienphapluat.vn search by document number."""
    link = law.link or law.source
    if not link and law.so_hieu:
        link = TVPL_SEARCH_URL.format(keyword=quote(law.so_hieu, safe=""))
    return link or None


def law_to_source(law: Law) -> LawSource:
    link = build_law_link(law)
    return LawSource(
        id=law.id,
        title=law.title or DEFAULT_TITLE,
        article_reference=law.article_reference,
        source=law.source or law.link or link,
        link=link,
        so_hieu=law.so_hieu,
        loai_van_ban=law.loai_van_ban,
        category=law.category or LOCAL_CATEGORY,
    )

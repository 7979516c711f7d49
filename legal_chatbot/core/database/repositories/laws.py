"""
Law repository.

Data access for the ``laws`` table: candidate retrieval for the chat local
search and inserts from the document upload endpoint.
"""

from __future__ import annotations

from typing import List, Sequence

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.laws import Law
from .base import AsyncBaseRepository, QueryBuilder

CANDIDATE_LIMIT = 10


class LawRepository(AsyncBaseRepository[Law]):
    """Repository for law documents."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Law)

    async def search_candidates(
        self, terms: Sequence[str], phrase: str, limit: int = CANDIDATE_LIMIT
    ) -> List[Law]:
        """Fetch laws whose title or body contains any search term.

        Every term becomes a case-insensitive ``ILIKE '%term%'`` condition on
        ``title`` and ``noi_dung``; the conditions are OR-ed. When ``terms`` is
        empty the whole ``phrase`` is matched instead.

        Args:
            terms: Lower-cased search tokens
            phrase: Full search text used when there are no tokens
            limit: Maximum rows returned (ranking happens in Python afterwards)

        Returns:
            Up to ``limit`` candidate rows, ordered by id
        """
        needles = list(terms) if terms else [phrase]
        conditions = []
        for needle in needles:
            pattern = QueryBuilder.like_pattern(needle)
            conditions.append(Law.title.ilike(pattern, escape="\\"))  # type: ignore[union-attr]
            conditions.append(Law.noi_dung.ilike(pattern, escape="\\"))  # type: ignore[union-attr]

        stmt = select(Law).where(or_(*conditions)).order_by(Law.id).limit(limit)  # type: ignore[arg-type]
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

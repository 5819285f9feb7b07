from __future__ import annotations

from typing import Iterable, List

from sqlalchemy import select

from sweepstakes_hub.filtering.criteria import Criterion
from sweepstakes_hub.filtering.sql import apply_pushdown
from sweepstakes_hub.models.competition import CompetitionRow
from .base import BaseRepository


class CompetitionRowRepository(BaseRepository[CompetitionRow]):
    """Repository for the ``competitions`` table."""

    model = CompetitionRow

    async def select(self, criteria: Iterable[Criterion] = ()) -> List[CompetitionRow]:
        """Rows matching pushdown criteria, newest first."""
        stmt = apply_pushdown(select(CompetitionRow), criteria)
        stmt = stmt.order_by(CompetitionRow.created_at.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def exists(self, competition_id: str) -> bool:
        return await self.get_by_id(competition_id) is not None

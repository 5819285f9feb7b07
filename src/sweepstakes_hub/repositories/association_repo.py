from __future__ import annotations

from typing import List, Optional, Sequence

from sqlalchemy import delete, select

from sweepstakes_hub.models.associations import (
    CompetitionEligibilityRow,
    CompetitionRequirementRow,
    SavedCompetitionRow,
)
from sweepstakes_hub.models.competition import CompetitionRow
from .base import BaseRepository


class EligibilityRepository(BaseRepository[CompetitionEligibilityRow]):
    """Repository for ``competition_eligibility`` (one row per requirements line)."""

    model = CompetitionEligibilityRow

    async def list_for(self, competition_id: str) -> List[CompetitionEligibilityRow]:
        stmt = (
            select(CompetitionEligibilityRow)
            .where(CompetitionEligibilityRow.competition_id == competition_id)
            .order_by(CompetitionEligibilityRow.created_at, CompetitionEligibilityRow.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add_many(self, competition_id: str, lines: Sequence[str]) -> int:
        for line in lines:
            self.session.add(CompetitionEligibilityRow(competition_id=competition_id, criteria=line))
        await self.session.flush()
        return len(lines)

    async def clear_for(self, competition_id: str) -> None:
        await self.session.execute(
            delete(CompetitionEligibilityRow).where(CompetitionEligibilityRow.competition_id == competition_id)
        )


class RequirementRepository(BaseRepository[CompetitionRequirementRow]):
    """Repository for ``competition_requirements`` (one row per rule)."""

    model = CompetitionRequirementRow

    async def list_for(self, competition_id: str) -> List[CompetitionRequirementRow]:
        stmt = (
            select(CompetitionRequirementRow)
            .where(CompetitionRequirementRow.competition_id == competition_id)
            .order_by(CompetitionRequirementRow.created_at, CompetitionRequirementRow.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add_many(self, competition_id: str, lines: Sequence[str]) -> int:
        for line in lines:
            self.session.add(CompetitionRequirementRow(competition_id=competition_id, requirement=line))
        await self.session.flush()
        return len(lines)

    async def clear_for(self, competition_id: str) -> None:
        await self.session.execute(
            delete(CompetitionRequirementRow).where(CompetitionRequirementRow.competition_id == competition_id)
        )


class SavedCompetitionRepository(BaseRepository[SavedCompetitionRow]):
    """Repository for ``saved_competitions`` bookmarks."""

    model = SavedCompetitionRow

    async def find(self, user_id: str, competition_id: str) -> Optional[SavedCompetitionRow]:
        stmt = select(SavedCompetitionRow).where(
            SavedCompetitionRow.user_id == user_id,
            SavedCompetitionRow.competition_id == competition_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def remove(self, user_id: str, competition_id: str) -> bool:
        existing = await self.find(user_id, competition_id)
        if existing is None:
            return False
        await self.delete(existing)
        return True

    async def competitions_for_user(self, user_id: str) -> List[CompetitionRow]:
        """Bookmarked competitions, most recently saved first."""
        stmt = (
            select(CompetitionRow)
            .join(SavedCompetitionRow, SavedCompetitionRow.competition_id == CompetitionRow.id)
            .where(SavedCompetitionRow.user_id == user_id)
            .order_by(SavedCompetitionRow.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

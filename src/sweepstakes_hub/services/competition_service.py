"""
Competition service: list/get/create/update over the hosted ``competitions`` table plus
the association lists (eligibility, requirements, bookmarks).

Each primary write is its own unit of work. Eligibility and requirement rows are
projections of ``requirements``/``rules`` written afterwards, each in a separate
best-effort unit of work: a projection failure is logged and reported in
``SaveOutcome.side_effects`` but never rolls back or fails the primary write.
Callers re-list after a save instead of patching local state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sweepstakes_hub.core.database import DatabaseManager
from sweepstakes_hub.errors import NotFound, from_db_error
from sweepstakes_hub.filtering.criteria import split_criteria
from sweepstakes_hub.filtering.memory import apply_criteria
from sweepstakes_hub.filtering.spec import FilterSpec
from sweepstakes_hub.mapping import to_storage_model, to_ui_model
from sweepstakes_hub.repositories import (
    CompetitionRowRepository,
    EligibilityRepository,
    RequirementRepository,
    SavedCompetitionRepository,
    UserRepository,
)
from sweepstakes_hub.schemas.associations import EligibilityCriterion, RequirementLine
from sweepstakes_hub.schemas.competition import Competition, CompetitionFormData
from sweepstakes_hub.utils.timestamps import format_timestamp

logger = logging.getLogger(__name__)

ELIGIBILITY_TABLE = "competition_eligibility"
REQUIREMENTS_TABLE = "competition_requirements"


@dataclass(frozen=True)
class SideEffectOutcome:
    """Result of one best-effort projection write."""

    table: str
    ok: bool
    rows: int = 0
    error: Optional[str] = None


@dataclass(frozen=True)
class SaveOutcome:
    """Primary write result, kept separate from the projection side effects."""

    competition: Competition
    created: bool
    side_effects: Tuple[SideEffectOutcome, ...] = field(default_factory=tuple)

    @property
    def side_effects_ok(self) -> bool:
        return all(effect.ok for effect in self.side_effects)

    @property
    def failed_side_effects(self) -> List[SideEffectOutcome]:
        return [effect for effect in self.side_effects if not effect.ok]


def eligibility_lines(requirements: str) -> List[str]:
    """Requirements text -> one trimmed criterion per non-blank line."""
    return [line.strip() for line in requirements.split("\n") if line.strip()]


class CompetitionService:
    """Async operations on competition records, returning UI models."""

    def __init__(self, db: DatabaseManager, *, write_legacy_columns: bool = True) -> None:
        self._db = db
        self._write_legacy_columns = write_legacy_columns

    async def list(self, spec: Optional[FilterSpec] = None) -> List[Competition]:
        """Competitions matching ``spec``, newest first.

        Status/category/difficulty/search/end-date are pushed down to SQL; the prize range
        is applied after retrieval.
        """
        pushdown, local = split_criteria(spec.criteria() if spec is not None else ())
        try:
            async with self._db.session() as session:
                rows = await CompetitionRowRepository(session).select(pushdown)
                records = [to_ui_model(row.to_dict()) for row in rows]
        except SQLAlchemyError as e:
            raise from_db_error(e, "load competitions") from e
        return apply_criteria(local, records)

    async def get(self, competition_id: str) -> Competition:
        try:
            async with self._db.session() as session:
                row = await CompetitionRowRepository(session).get_by_id(competition_id)
                record = to_ui_model(row.to_dict()) if row is not None else None
        except SQLAlchemyError as e:
            raise from_db_error(e, "load the competition") from e
        if record is None:
            raise NotFound(f"Competition {competition_id} was not found.")
        return record

    async def create(self, form: CompetitionFormData, *, created_by: Optional[str] = None) -> SaveOutcome:
        values = to_storage_model(form, write_legacy_columns=self._write_legacy_columns)
        if created_by:
            values["created_by"] = created_by
        try:
            async with self._db.session() as session:
                row = await CompetitionRowRepository(session).insert(values)
                record = to_ui_model(row.to_dict())
        except SQLAlchemyError as e:
            raise from_db_error(e, "create the competition") from e
        logger.info("Created competition %s (%s)", record.id, record.title)
        side_effects = await self._write_projections(record.id, form, replace=False)
        return SaveOutcome(competition=record, created=True, side_effects=side_effects)

    async def update(self, competition_id: str, form: CompetitionFormData) -> SaveOutcome:
        values = to_storage_model(
            form, existing_id=competition_id, write_legacy_columns=self._write_legacy_columns
        )
        try:
            async with self._db.session() as session:
                row = await CompetitionRowRepository(session).update(competition_id, values)
                record = to_ui_model(row.to_dict()) if row is not None else None
        except SQLAlchemyError as e:
            raise from_db_error(e, "update the competition") from e
        if record is None:
            raise NotFound(f"Competition {competition_id} was not found.")
        logger.info("Updated competition %s", competition_id)
        side_effects = await self._write_projections(competition_id, form, replace=True)
        return SaveOutcome(competition=record, created=False, side_effects=side_effects)

    async def _write_projections(
        self, competition_id: str, form: CompetitionFormData, *, replace: bool
    ) -> Tuple[SideEffectOutcome, ...]:
        criteria = eligibility_lines(form.requirements)
        rules = list(form.rules)

        async def write_eligibility(session: AsyncSession) -> int:
            repo = EligibilityRepository(session)
            if replace:
                await repo.clear_for(competition_id)
            return await repo.add_many(competition_id, criteria) if criteria else 0

        async def write_requirements(session: AsyncSession) -> int:
            repo = RequirementRepository(session)
            if replace:
                await repo.clear_for(competition_id)
            return await repo.add_many(competition_id, rules) if rules else 0

        outcomes = []
        if replace or criteria:
            outcomes.append(await self._best_effort(ELIGIBILITY_TABLE, competition_id, write_eligibility))
        if replace or rules:
            outcomes.append(await self._best_effort(REQUIREMENTS_TABLE, competition_id, write_requirements))
        return tuple(outcomes)

    async def _best_effort(
        self,
        table: str,
        competition_id: str,
        write: Callable[[AsyncSession], Awaitable[int]],
    ) -> SideEffectOutcome:
        try:
            async with self._db.session() as session:
                rows = await write(session)
        except Exception as e:  # noqa: BLE001
            logger.warning("Secondary write to %s failed for competition %s: %s", table, competition_id, e)
            return SideEffectOutcome(table=table, ok=False, error=str(e))
        return SideEffectOutcome(table=table, ok=True, rows=rows)

    async def list_eligibility(self, competition_id: str) -> List[EligibilityCriterion]:
        try:
            async with self._db.session() as session:
                rows = await EligibilityRepository(session).list_for(competition_id)
                return [
                    EligibilityCriterion(
                        id=row.id,
                        competition_id=row.competition_id,
                        criteria=row.criteria,
                        created_at=format_timestamp(row.created_at),
                    )
                    for row in rows
                ]
        except SQLAlchemyError as e:
            raise from_db_error(e, "load eligibility criteria") from e

    async def list_requirements(self, competition_id: str) -> List[RequirementLine]:
        try:
            async with self._db.session() as session:
                rows = await RequirementRepository(session).list_for(competition_id)
                return [
                    RequirementLine(
                        id=row.id,
                        competition_id=row.competition_id,
                        requirement=row.requirement,
                        created_at=format_timestamp(row.created_at),
                    )
                    for row in rows
                ]
        except SQLAlchemyError as e:
            raise from_db_error(e, "load requirements") from e

    async def list_saved(self, user_id: str) -> List[Competition]:
        """The user's bookmarked competitions, most recently saved first."""
        try:
            async with self._db.session() as session:
                rows = await SavedCompetitionRepository(session).competitions_for_user(user_id)
                return [to_ui_model(row.to_dict()) for row in rows]
        except SQLAlchemyError as e:
            raise from_db_error(e, "load saved competitions") from e

    async def save_for_user(self, user_id: str, competition_id: str, *, email: Optional[str] = None) -> bool:
        """Bookmark a competition. Returns False when it was already saved."""
        try:
            async with self._db.session() as session:
                if not await CompetitionRowRepository(session).exists(competition_id):
                    raise NotFound(f"Competition {competition_id} was not found.")
                saved = SavedCompetitionRepository(session)
                if await saved.find(user_id, competition_id) is not None:
                    return False
                await UserRepository(session).ensure(user_id, email)
                await saved.insert({"user_id": user_id, "competition_id": competition_id})
        except SQLAlchemyError as e:
            raise from_db_error(e, "save the competition") from e
        return True

    async def unsave_for_user(self, user_id: str, competition_id: str) -> bool:
        """Remove a bookmark. Returns False when there was nothing to remove."""
        try:
            async with self._db.session() as session:
                return await SavedCompetitionRepository(session).remove(user_id, competition_id)
        except SQLAlchemyError as e:
            raise from_db_error(e, "remove the saved competition") from e

    async def toggle_saved(self, user_id: str, competition_id: str, *, email: Optional[str] = None) -> bool:
        """Flip the bookmark; returns the new saved state."""
        if await self.unsave_for_user(user_id, competition_id):
            return False
        await self.save_for_user(user_id, competition_id, email=email)
        return True

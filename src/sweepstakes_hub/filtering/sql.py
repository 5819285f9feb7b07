"""
SQL interpreter for filter criteria (server pushdown mode).

The column expressions below mirror the mapper's read rules so that a pushed-down
predicate selects exactly the rows the in-memory interpreter would keep.
"""

from __future__ import annotations

from typing import Iterable

from sqlalchemy import Select, String, case, func, or_
from sqlalchemy.sql.elements import ColumnElement

from sweepstakes_hub.mapping import DEFAULT_DIFFICULTY, DEFAULT_STATUS, VALID_DIFFICULTIES, VALID_STATUSES
from sweepstakes_hub.models.competition import CompetitionRow

from .criteria import Criterion, EndsOnOrBefore, FieldEquals, PrizeBetween, TextContains


def effective_status() -> ColumnElement:
    return case(
        (CompetitionRow.status.in_(VALID_STATUSES), CompetitionRow.status),
        else_=DEFAULT_STATUS.value,
    )


def effective_difficulty() -> ColumnElement:
    """``entry_difficulty`` first, then ``difficulty``, then the default."""
    return case(
        (CompetitionRow.entry_difficulty.in_(VALID_DIFFICULTIES), CompetitionRow.entry_difficulty),
        (CompetitionRow.difficulty.in_(VALID_DIFFICULTIES), CompetitionRow.difficulty),
        else_=DEFAULT_DIFFICULTY.value,
    )


def effective_end_date() -> ColumnElement:
    return func.coalesce(CompetitionRow.deadline, CompetitionRow.end_date)


def _field_column(field: str) -> ColumnElement:
    if field == "status":
        return effective_status()
    if field == "difficulty":
        return effective_difficulty()
    if field == "category":
        return CompetitionRow.category
    raise ValueError(f"unsupported filter field: {field!r}")


def to_clause(criterion: Criterion) -> ColumnElement[bool]:
    if isinstance(criterion, FieldEquals):
        return _field_column(criterion.field) == criterion.value
    if isinstance(criterion, TextContains):
        title = func.lower(CompetitionRow.title, type_=String)
        description = func.lower(func.coalesce(CompetitionRow.description, ""), type_=String)
        return or_(
            title.contains(criterion.query, autoescape=True),
            description.contains(criterion.query, autoescape=True),
        )
    if isinstance(criterion, EndsOnOrBefore):
        end = effective_end_date()
        return or_(end.is_(None), end <= criterion.cutoff)
    if isinstance(criterion, PrizeBetween):
        raise ValueError("prize range is evaluated after retrieval, not in SQL")
    raise TypeError(f"unknown criterion: {criterion!r}")


def apply_pushdown(stmt: Select, criteria: Iterable[Criterion]) -> Select:
    for criterion in criteria:
        stmt = stmt.where(to_clause(criterion))
    return stmt

"""In-memory interpreter for filter criteria (client-side mode and fallback)."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional

from sweepstakes_hub.schemas.competition import Competition
from sweepstakes_hub.utils.timestamps import parse_timestamp

from .criteria import Criterion, EndsOnOrBefore, FieldEquals, PrizeBetween, TextContains, parse_prize


def effective_end_date(competition: Competition) -> Optional[datetime]:
    """``deadline`` when set, else ``end_date``."""
    return parse_timestamp(competition.deadline) or parse_timestamp(competition.end_date)


def _field_value(competition: Competition, field: str) -> str:
    if field == "status":
        return competition.status.value
    if field == "difficulty":
        return competition.difficulty.value
    if field == "category":
        return competition.category
    raise ValueError(f"unsupported filter field: {field!r}")


def matches(criterion: Criterion, competition: Competition) -> bool:
    if isinstance(criterion, FieldEquals):
        return _field_value(competition, criterion.field) == criterion.value
    if isinstance(criterion, TextContains):
        return (
            criterion.query in competition.title.lower()
            or criterion.query in competition.description.lower()
        )
    if isinstance(criterion, EndsOnOrBefore):
        end = effective_end_date(competition)
        return end is None or end <= criterion.cutoff
    if isinstance(criterion, PrizeBetween):
        prize = parse_prize(competition.prize_value)
        return prize is None or criterion.minimum <= prize <= criterion.maximum
    raise TypeError(f"unknown criterion: {criterion!r}")


def apply_criteria(criteria: Iterable[Criterion], records: Iterable[Competition]) -> List[Competition]:
    """Records matching every criterion, input order preserved."""
    criteria = tuple(criteria)
    return [record for record in records if all(matches(c, record) for c in criteria)]

"""
Filter criteria shared by both interpreters (``filtering.sql`` and ``filtering.memory``).

A criterion with ``pushdown = False`` is never compiled to SQL: it is applied in memory
after retrieval in both modes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar, Iterable, Optional, Tuple, Union

_NON_DIGITS = re.compile(r"[^0-9]")


def parse_prize(value: object) -> Optional[int]:
    """Lossy prize parse: drop every non-digit character ("$1,000" -> 1000).

    Returns None when nothing numeric is left ("Trip to Paris").
    """
    if value is None:
        return None
    digits = _NON_DIGITS.sub("", str(value))
    if not digits:
        return None
    return int(digits)


@dataclass(frozen=True)
class FieldEquals:
    """Exact, case-sensitive match on ``status``, ``category`` or ``difficulty``."""

    field: str
    value: str
    pushdown: ClassVar[bool] = True


@dataclass(frozen=True)
class TextContains:
    """Case-insensitive substring match on title or description. ``query`` is lowercased."""

    query: str
    pushdown: ClassVar[bool] = True


@dataclass(frozen=True)
class EndsOnOrBefore:
    """End date (``deadline``, else ``end_date``) is <= cutoff. Records with no end date pass."""

    cutoff: datetime
    pushdown: ClassVar[bool] = True


@dataclass(frozen=True)
class PrizeBetween:
    """``minimum <= parse_prize(prize_value) <= maximum``. Unparseable prizes pass.

    Stored prize values are free text, so this is always evaluated after retrieval.
    """

    minimum: int
    maximum: int
    pushdown: ClassVar[bool] = False


Criterion = Union[FieldEquals, TextContains, EndsOnOrBefore, PrizeBetween]

FILTERABLE_FIELDS = ("status", "category", "difficulty")


def split_criteria(criteria: Iterable[Criterion]) -> Tuple[Tuple[Criterion, ...], Tuple[Criterion, ...]]:
    """Return (pushdown, in_memory_only)."""
    pushdown = []
    local = []
    for criterion in criteria:
        (pushdown if criterion.pushdown else local).append(criterion)
    return tuple(pushdown), tuple(local)

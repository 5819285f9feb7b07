"""
Record mapper: storage rows (snake_case, nullable, permissive prize type) to the UI read
model and editor payloads back to storage writes. Pure functions, no I/O.

Known data debt, kept on purpose:

* ``difficulty`` may live in either ``difficulty`` or the legacy ``entry_difficulty``
  column. ``entry_difficulty`` wins whenever it holds a recognised value.
* ``prize_value`` may be stored as text or as a number; it is always rendered as text.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Union

from sweepstakes_hub.schemas.competition import (
    Competition,
    CompetitionFormData,
    CompetitionStatus,
    Difficulty,
)
from sweepstakes_hub.utils.timestamps import format_timestamp, parse_timestamp

VALID_DIFFICULTIES = tuple(d.value for d in Difficulty)
VALID_STATUSES = tuple(s.value for s in CompetitionStatus)
DEFAULT_DIFFICULTY = Difficulty.MEDIUM
DEFAULT_STATUS = CompetitionStatus.ACTIVE


def resolve_difficulty(difficulty: Any, entry_difficulty: Any) -> Difficulty:
    """Legacy ``entry_difficulty`` takes precedence over ``difficulty``."""
    for candidate in (entry_difficulty, difficulty):
        if candidate in VALID_DIFFICULTIES:
            return Difficulty(candidate)
    return DEFAULT_DIFFICULTY


def resolve_status(status: Any) -> CompetitionStatus:
    if status in VALID_STATUSES:
        return CompetitionStatus(status)
    return DEFAULT_STATUS


def render_prize(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _rules(value: Any) -> List[str]:
    if isinstance(value, (list, tuple)):
        return ["" if rule is None else str(rule) for rule in value]
    return []


def to_ui_model(row: Mapping[str, Any]) -> Competition:
    """Storage row -> Competition. Never fails: absent optionals become "" or []."""
    return Competition(
        id=_text(row.get("id")),
        title=_text(row.get("title")),
        description=_text(row.get("description")),
        image_url=_text(row.get("image_url")),
        competition_url=_text(row.get("competition_url")),
        category=_text(row.get("category")),
        difficulty=resolve_difficulty(row.get("difficulty"), row.get("entry_difficulty")),
        prize_value=render_prize(row.get("prize_value")),
        requirements=_text(row.get("requirements")),
        rules=_rules(row.get("rules")),
        start_date=format_timestamp(row.get("start_date")),
        end_date=format_timestamp(row.get("end_date")),
        deadline=format_timestamp(row.get("deadline")),
        status=resolve_status(row.get("status")),
        created_at=format_timestamp(row.get("created_at")),
        updated_at=format_timestamp(row.get("updated_at")),
        created_by=_text(row.get("created_by")),
    )


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    return value if value else None


def _enum_value(value: Any) -> str:
    return value.value if hasattr(value, "value") else str(value)


def to_storage_model(
    data: Union[CompetitionFormData, Competition],
    existing_id: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
    write_legacy_columns: bool = True,
) -> Dict[str, Any]:
    """Editor payload -> column values for an insert/update.

    Blank optional strings become None (not provided), enums become their raw strings and
    ``updated_at`` is stamped on every write. Server-managed ``created_at``/``created_by``
    are never part of the write.
    """
    end_date = parse_timestamp(data.end_date)
    competition_url = _blank_to_none(data.competition_url)
    difficulty = _enum_value(data.difficulty)
    record: Dict[str, Any] = {
        "title": data.title,
        "description": _blank_to_none(data.description),
        "image_url": data.image_url,
        "competition_url": competition_url,
        "category": data.category,
        "difficulty": difficulty,
        "prize_value": render_prize(data.prize_value),
        "requirements": data.requirements,
        "rules": list(data.rules),
        "start_date": parse_timestamp(data.start_date),
        "end_date": end_date,
        "status": _enum_value(data.status),
        "updated_at": parse_timestamp(now) if now is not None else datetime.now(timezone.utc),
    }
    if write_legacy_columns:
        record["deadline"] = end_date
        record["entry_difficulty"] = difficulty
        record["entry_url"] = competition_url
    if existing_id:
        record["id"] = existing_id
    return record

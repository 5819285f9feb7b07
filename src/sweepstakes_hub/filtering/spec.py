from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from sweepstakes_hub.errors import ValidationFailed
from sweepstakes_hub.schemas.competition import CompetitionStatus, Difficulty
from sweepstakes_hub.utils.timestamps import parse_timestamp

from .criteria import Criterion, EndsOnOrBefore, FieldEquals, PrizeBetween, TextContains

# Listing UI sentinels meaning "no filter on this facet".
_NO_FILTER = ("all", "any")


class FilterSpec(BaseModel):
    """Immutable filter specification for competition listings."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    status: Optional[CompetitionStatus] = None
    category: Optional[str] = None
    difficulty_level: Optional[Difficulty] = None
    search: Optional[str] = None
    prize_range: Optional[Tuple[int, int]] = None
    end_date_cutoff: Optional[datetime] = None

    @field_validator("status", "category", "difficulty_level", mode="before")
    @classmethod
    def _sentinel_means_unset(cls, v: Any) -> Any:
        if isinstance(v, str) and (not v or v.lower() in _NO_FILTER):
            return None
        return v

    @field_validator("search", mode="before")
    @classmethod
    def _blank_search(cls, v: Any) -> Any:
        return v or None

    @field_validator("end_date_cutoff", mode="before")
    @classmethod
    def _cutoff(cls, v: Any) -> Any:
        if v is None or v == "":
            return None
        dt = parse_timestamp(v)
        if dt is None:
            raise ValueError("Must be an ISO-8601 date")
        return dt

    @model_validator(mode="after")
    def _ordered_range(self) -> "FilterSpec":
        if self.prize_range is not None and self.prize_range[0] > self.prize_range[1]:
            raise ValueError("prize range minimum must not exceed maximum")
        return self

    @classmethod
    def parse(cls, data: Mapping[str, Any]) -> "FilterSpec":
        """Build from user input; raises ValidationFailed instead of pydantic's error."""
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            fields = {".".join(str(p) for p in err["loc"]) or "filters": err["msg"] for err in e.errors()}
            raise ValidationFailed("Invalid filter.", fields=fields) from e

    def merged(self, **changes: Any) -> "FilterSpec":
        """New spec with ``changes`` (snake_case names) applied on top of this one."""
        data = self.model_dump()
        data.update(changes)
        return FilterSpec.parse(data)

    @property
    def is_empty(self) -> bool:
        return not self.criteria()

    def criteria(self) -> Tuple[Criterion, ...]:
        out = []
        if self.status is not None:
            out.append(FieldEquals("status", self.status.value))
        if self.category is not None:
            out.append(FieldEquals("category", self.category))
        if self.difficulty_level is not None:
            out.append(FieldEquals("difficulty", self.difficulty_level.value))
        if self.search is not None:
            out.append(TextContains(self.search.lower()))
        if self.end_date_cutoff is not None:
            out.append(EndsOnOrBefore(self.end_date_cutoff))
        if self.prize_range is not None:
            out.append(PrizeBetween(self.prize_range[0], self.prize_range[1]))
        return tuple(out)

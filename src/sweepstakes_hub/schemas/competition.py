"""
UI-side competition shapes: the read model (``Competition``) and the editor form
(``CompetitionFormData``). Both serialize with camelCase aliases.

The form model is the validation boundary: anything that reaches the competition
service has passed ``validate_form``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Mapping, Union

from pydantic import (
    AnyUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel

from sweepstakes_hub.errors import ValidationFailed
from sweepstakes_hub.utils.timestamps import is_timestamp


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    EXPERT = "Expert"


class CompetitionStatus(str, Enum):
    ACTIVE = "active"
    UPCOMING = "upcoming"
    PAST = "past"
    ARCHIVED = "archived"


# Recommended, not enforced: category is free-form in storage.
COMPETITION_CATEGORIES = (
    "Photography",
    "Technology",
    "Food",
    "Fitness",
    "Writing",
    "Design",
    "Sweepstakes",
    "Video Contest",
    "Social Media",
    "Instant Win",
)

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Competition(BaseModel):
    """Read model consumed by listings and the admin sidebar. Optionals are never None."""

    model_config = _CAMEL

    id: str
    title: str
    description: str = ""
    image_url: str = ""
    competition_url: str = ""
    category: str = ""
    difficulty: Difficulty = Difficulty.MEDIUM
    prize_value: str = ""
    requirements: str = ""
    rules: List[str] = Field(default_factory=list)
    start_date: str = ""
    end_date: str = ""
    deadline: str = ""
    status: CompetitionStatus = CompetitionStatus.ACTIVE
    created_at: str = ""
    updated_at: str = ""
    created_by: str = ""


class CompetitionSummary(BaseModel):
    """Sidebar entry."""

    model_config = _CAMEL

    id: str
    title: str
    status: CompetitionStatus
    category: str


_url_adapter = TypeAdapter(AnyUrl)

_REQUIRED_LABELS = {
    "title": "Title",
    "image_url": "Image URL",
    "category": "Category",
    "prize_value": "Prize value",
    "requirements": "Requirements",
}


class CompetitionFormData(BaseModel):
    """Editor payload. Blank optional strings stay blank here; the mapper turns them into NULL."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, validate_default=True)

    title: str = ""
    description: str = ""
    image_url: str = ""
    competition_url: str = ""
    category: str = ""
    difficulty: Difficulty = Difficulty.MEDIUM
    prize_value: str = ""
    requirements: str = ""
    rules: List[str] = Field(default_factory=lambda: [""])
    start_date: str = ""
    end_date: str = ""
    status: CompetitionStatus = CompetitionStatus.ACTIVE

    @field_validator("prize_value", mode="before")
    @classmethod
    def _prize_as_text(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("description", "competition_url", "start_date", "end_date", mode="before")
    @classmethod
    def _none_as_blank(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("title", "image_url", "category", "prize_value", "requirements")
    @classmethod
    def _required(cls, v: str, info: ValidationInfo) -> str:
        if not v:
            raise ValueError(f"{_REQUIRED_LABELS[info.field_name]} is required")
        return v

    @field_validator("image_url", "competition_url")
    @classmethod
    def _valid_url(cls, v: str) -> str:
        if not v:
            return v
        try:
            _url_adapter.validate_python(v)
        except ValidationError:
            raise ValueError("Must be a valid URL") from None
        return v

    @field_validator("rules")
    @classmethod
    def _rules_not_empty(cls, v: List[str]) -> List[str]:
        for rule in v:
            if not rule:
                raise ValueError("Rule cannot be empty")
        return v

    @field_validator("start_date", "end_date")
    @classmethod
    def _iso_date(cls, v: str) -> str:
        if v and not is_timestamp(v):
            raise ValueError("Must be an ISO-8601 date")
        return v

    @classmethod
    def from_competition(cls, competition: Competition) -> "CompetitionFormData":
        """Editor defaults for an existing record (no validation, like a freshly opened form)."""
        return cls.model_construct(
            title=competition.title,
            description=competition.description,
            image_url=competition.image_url,
            competition_url=competition.competition_url,
            category=competition.category,
            difficulty=competition.difficulty,
            prize_value=competition.prize_value,
            requirements=competition.requirements,
            rules=list(competition.rules),
            start_date=competition.start_date,
            end_date=competition.end_date,
            status=competition.status,
        )


def default_form() -> CompetitionFormData:
    """Blank editor state: Medium difficulty, active, one empty rule line to fill in."""
    return CompetitionFormData.model_construct()


def add_rule(rules: List[str]) -> List[str]:
    return [*rules, ""]


def remove_rule(rules: List[str], index: int) -> List[str]:
    """Drop the rule at ``index``; later rules shift down by one."""
    if index < 0 or index >= len(rules):
        raise IndexError(f"rule index {index} out of range")
    return [rule for i, rule in enumerate(rules) if i != index]


def _field_errors(exc: ValidationError) -> Dict[str, str]:
    """Per-field messages keyed by the camelCase field name the editor uses."""
    aliases = {name: info.alias or name for name, info in CompetitionFormData.model_fields.items()}
    fields: Dict[str, str] = {}
    for err in exc.errors():
        parts = [str(part) for part in err.get("loc", ())]
        if parts:
            parts[0] = aliases.get(parts[0], parts[0])
        loc = ".".join(parts) or "__root__"
        msg = str(err.get("msg", "Invalid value"))
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        fields.setdefault(loc, msg)
    return fields


def validate_form(payload: Union[CompetitionFormData, Mapping[str, Any]]) -> CompetitionFormData:
    """Validate editor input; raises ValidationFailed with per-field messages."""
    if isinstance(payload, CompetitionFormData):
        payload = payload.model_dump()
    try:
        return CompetitionFormData.model_validate(dict(payload))
    except ValidationError as e:
        raise ValidationFailed("Please fix the highlighted fields.", fields=_field_errors(e)) from e

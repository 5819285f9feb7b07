"""Read models for the secondary association tables."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _AssociationModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EligibilityCriterion(_AssociationModel):
    id: str
    competition_id: str
    criteria: str
    created_at: str = ""


class RequirementLine(_AssociationModel):
    id: str
    competition_id: str
    requirement: str
    created_at: str = ""

"""SQLAlchemy models for the six hosted collections."""

from .base import Base
from .associations import (
    CompetitionEligibilityRow,
    CompetitionRequirementRow,
    SavedCompetitionRow,
)
from .competition import CompetitionRow
from .users import AdminUserRow, UserRow

__all__ = [
    "Base",
    "CompetitionRow",
    "UserRow",
    "AdminUserRow",
    "CompetitionEligibilityRow",
    "CompetitionRequirementRow",
    "SavedCompetitionRow",
]

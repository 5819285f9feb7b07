"""Repository layer for DB access only (table-scoped CRUD + simple queries).

Repositories are pure DB access - no business logic, no commits. All of them
accept an AsyncSession explicitly, obtained from ``core.database.DatabaseManager``.
"""

from .base import BaseRepository
from .association_repo import EligibilityRepository, RequirementRepository, SavedCompetitionRepository
from .competition_repo import CompetitionRowRepository
from .user_repo import AdminUserRepository, UserRepository

__all__ = [
    "BaseRepository",
    "CompetitionRowRepository",
    "EligibilityRepository",
    "RequirementRepository",
    "SavedCompetitionRepository",
    "UserRepository",
    "AdminUserRepository",
]

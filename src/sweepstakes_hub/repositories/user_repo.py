from __future__ import annotations

from typing import Optional

from sqlalchemy import select

from sweepstakes_hub.models.base import utcnow
from sweepstakes_hub.models.users import AdminUserRow, UserRow
from .base import BaseRepository


class UserRepository(BaseRepository[UserRow]):
    """Repository for the base ``users`` table."""

    model = UserRow

    async def ensure(self, user_id: str, email: Optional[str]) -> UserRow:
        """Return the user row, creating it if missing (upsert by id)."""
        existing = await self.get_by_id(user_id)
        if existing is not None:
            if email and existing.email != email:
                existing.email = email
                existing.updated_at = utcnow()
                await self.session.flush()
            return existing
        return await self.add(UserRow(id=user_id, email=email))


class AdminUserRepository(BaseRepository[AdminUserRow]):
    """Repository for ``admin_users`` membership rows."""

    model = AdminUserRow

    async def get_by_user_id(self, user_id: str) -> Optional[AdminUserRow]:
        stmt = select(AdminUserRow).where(AdminUserRow.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def grant(self, user_id: str, is_super_admin: bool = False) -> AdminUserRow:
        existing = await self.get_by_user_id(user_id)
        if existing is not None:
            return existing
        return await self.add(AdminUserRow(user_id=user_id, is_super_admin=is_super_admin))

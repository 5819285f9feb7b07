from __future__ import annotations

from typing import Any, ClassVar, Generic, List, Mapping, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sweepstakes_hub.models.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Base repository with common table-scoped helpers.

    No commits are performed here - commit responsibility is left to the
    service layer (one ``DatabaseManager.session()`` per unit of work).
    """

    model: ClassVar[Type[Base]]

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with an async session."""
        self.session = session

    async def add(self, entity: T) -> T:
        """Add an entity to the session and flush so server defaults are populated."""
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def insert(self, values: Mapping[str, Any]) -> T:
        """Insert a row built from column values."""
        return await self.add(self.model(**dict(values)))  # type: ignore[arg-type]

    async def get_by_id(self, id_value: str) -> Optional[T]:
        """Get an entity by its primary key."""
        return await self.session.get(self.model, id_value)  # type: ignore[return-value]

    async def update(self, id_value: str, values: Mapping[str, Any]) -> Optional[T]:
        """Apply column values to an existing row; None when the id is unknown."""
        entity = await self.get_by_id(id_value)
        if entity is None:
            return None
        for key, value in values.items():
            if key == "id":
                continue
            setattr(entity, key, value)
        await self.session.flush()
        return entity

    async def list(self, limit: int = 100, offset: int = 0) -> List[T]:
        """List entities with pagination."""
        stmt = select(self.model).limit(limit).offset(offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete(self, entity: T) -> None:
        """Delete an entity from the session (not committed)."""
        await self.session.delete(entity)

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy.orm import DeclarativeBase


def new_id() -> str:
    """Server-assigned opaque identifier."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Declarative base for the hosted competition tables."""

    def to_dict(self) -> Dict[str, Any]:
        """Column name -> value, the same shape the backend returns for a selected row."""
        return {column.name: getattr(self, column.key) for column in self.__table__.columns}

"""Repository for audit trail entries."""

from __future__ import annotations

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import AuditEntry
from .base import BaseRepository


class AuditRepository(BaseRepository[AuditEntry]):
    """Persistence helpers for ``AuditEntry`` records."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, AuditEntry)

    async def list_recent(self, limit: int = 50) -> list[AuditEntry]:
        result = await self.session.execute(
            select(AuditEntry).order_by(AuditEntry.created_at.desc(), AuditEntry.id.desc()).limit(limit)
        )
        return list(result.scalars().all())


__all__ = ["AuditRepository"]

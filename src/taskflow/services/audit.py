"""Audit trail recording for administrative actions."""

from __future__ import annotations

import logging
from typing import Any

from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import AuditAction, AuditEntry
from ..repositories import AuditRepository

logger = logging.getLogger(__name__)


class AuditService:
    """Stage audit entries on the caller's session.

    Entries are flushed but not committed so they share the transaction of the
    change they describe.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._repository = AuditRepository(session)

    async def record(
        self,
        *,
        actor_id: int,
        action: AuditAction,
        target_type: str,
        target_id: int,
        details: dict[str, Any] | None = None,
    ) -> AuditEntry:
        entry = AuditEntry(
            actor_id=actor_id,
            action=action,
            target_type=target_type,
            target_id=target_id,
            details=details or {},
        )
        await self._repository.add(entry)
        logger.info(
            "Audit entry recorded",
            extra={
                "actor_id": actor_id,
                "action": action.value,
                "target_type": target_type,
                "target_id": target_id,
            },
        )
        return entry

    async def list_recent(self, limit: int = 50) -> list[AuditEntry]:
        return await self._repository.list_recent(limit)


__all__ = ["AuditService"]

"""Audit Trail"""

from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit import AuditLog
from app.models.user import User


class AuditService:
    """Appends AuditLog rows; the caller's transaction commits them"""

    @staticmethod
    def record(
        db: AsyncSession,
        actor: Optional[User],
        action: str,
        entity: str,
        entity_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> AuditLog:
        entry = AuditLog(
            user_id=actor.id if actor is not None else None,
            action=action,
            entity=entity,
            entity_id=entity_id,
            details=details,
        )
        db.add(entry)
        return entry

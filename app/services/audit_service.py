# app/services/audit_service.py

from uuid import UUID
from typing import Optional, Dict, Any
from loguru import logger
from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit import AuditLog
from app.core.database import AsyncSessionLocal


async def log_activity(
    action: str,
    actor_id: Optional[UUID],
    actor_role: Optional[str] = None,
    actor_name: Optional[str] = None,
    application_id: Optional[UUID] = None,
    remarks: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None
):
    """
    Creates an audit log entry in its own DB session.
    Safe for use in BackgroundTasks.
    """
    async with AsyncSessionLocal() as session:
        try:
            log_entry = AuditLog(
                actor_id=actor_id,
                actor_role=actor_role,
                actor_name=actor_name,
                application_id=application_id,
                action=action,
                remarks=remarks,
                details=details or {}
            )

            session.add(log_entry)
            await session.commit()

        except Exception as e:
            # a lost audit row must not fail the background worker
            logger.error(f"AUDIT LOG ERROR ({action}): {e}")
            await session.rollback()


async def get_audit_trail(session: AsyncSession, application_id: UUID) -> list[AuditLog]:
    result = await session.execute(
        select(AuditLog)
        .where(AuditLog.application_id == application_id)
        .order_by(AuditLog.timestamp)
    )
    return list(result.scalars().all())

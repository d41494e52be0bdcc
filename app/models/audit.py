# app/models/audit.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy import ForeignKey, JSON, String
from datetime import datetime
from typing import Any, Optional
import uuid


class AuditLog(SQLModel, table=True):
    """
    One row per candidate milestone (sign-up, payment, submission).
    Rows are written from background tasks and never updated.
    """
    __tablename__ = "audit_logs"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(PG_UUID(as_uuid=True), primary_key=True)
    )

    # null for account-level events such as sign-up
    application_id: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(PG_UUID(as_uuid=True), ForeignKey("applications.id"), nullable=True, index=True)
    )

    actor_id: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(PG_UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
    )
    actor_role: Optional[str] = Field(default=None, max_length=20)
    actor_name: Optional[str] = None

    # AuditAction value
    action: str = Field(sa_column=Column(String(50), nullable=False, index=True))
    remarks: Optional[str] = None

    # {"application_number": ...} on submission, {"amount": ...} on payment
    details: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))

    timestamp: datetime = Field(default_factory=datetime.utcnow)

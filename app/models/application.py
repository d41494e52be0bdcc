# app/models/application.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy import Enum as PGEnum
from datetime import datetime
import uuid
from typing import Optional

from app.models.enums import ApplicationStatus


class Application(SQLModel, table=True):
    __tablename__ = "applications"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(PG_UUID(as_uuid=True), primary_key=True)
    )

    user_id: uuid.UUID = Field(
        sa_column=Column(PG_UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    )

    post_id: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(PG_UUID(as_uuid=True), ForeignKey("posts.id"), nullable=True)
    )

    status: ApplicationStatus = Field(
        default=ApplicationStatus.Draft,
        sa_column=Column(
            PGEnum(
                ApplicationStatus,
                name="application_status",
                values_callable=lambda e: [m.value for m in e],
            ),
            nullable=False,
        )
    )

    # Assigned only at final submission, e.g. REG20261234567
    application_number: Optional[str] = Field(
        default=None,
        sa_column=Column(String, nullable=True, unique=True)
    )

    submitted_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True)
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )

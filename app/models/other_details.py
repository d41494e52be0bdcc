# app/models/other_details.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy import DateTime, ForeignKey, String
from datetime import datetime
from typing import Optional
import uuid


class OtherDetails(SQLModel, table=True):
    __tablename__ = "other_details"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(PG_UUID(as_uuid=True), primary_key=True)
    )

    # upsert conflict target
    user_id: uuid.UUID = Field(
        sa_column=Column(PG_UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, unique=True)
    )

    application_id: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(PG_UUID(as_uuid=True), ForeignKey("applications.id"), nullable=True)
    )

    category: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    nationality: str = Field(sa_column=Column(String, nullable=False))
    religion: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    disability_status: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )

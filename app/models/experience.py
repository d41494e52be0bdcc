from sqlmodel import SQLModel, Field, Column
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Numeric, String, Text
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
import uuid


class ExperienceInfo(SQLModel, table=True):
    __tablename__ = "experience_info"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(PG_UUID(as_uuid=True), primary_key=True)
    )

    user_id: uuid.UUID = Field(
        sa_column=Column(PG_UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    )

    application_id: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(PG_UUID(as_uuid=True), ForeignKey("applications.id"), nullable=True)
    )

    company_name: str = Field(sa_column=Column(String, nullable=False))
    designation: str = Field(sa_column=Column(String, nullable=False))

    from_date: date = Field(sa_column=Column(Date, nullable=False))
    # NULL while the candidate still works there
    to_date: Optional[date] = Field(default=None, sa_column=Column(Date, nullable=True))
    is_current: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False))

    salary: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(12, 2), nullable=True))
    job_description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )

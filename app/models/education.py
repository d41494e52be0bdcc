from sqlmodel import SQLModel, Field, Column
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text
from datetime import datetime
from typing import Optional
import uuid


class EducationalQualification(SQLModel, table=True):
    __tablename__ = "educational_qualifications"

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

    qualification_type: str = Field(sa_column=Column(String, nullable=False))
    board_university: str = Field(sa_column=Column(String, nullable=False))
    passing_year: int = Field(sa_column=Column(Integer, nullable=False))

    percentage: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))
    grade: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    subjects: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    roll_number: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )

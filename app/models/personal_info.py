# app/models/personal_info.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy import Date, DateTime, ForeignKey, String, Text
from datetime import date, datetime
from typing import Optional
import uuid


class PersonalInfo(SQLModel, table=True):
    __tablename__ = "personal_info"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(PG_UUID(as_uuid=True), primary_key=True)
    )

    # one row per candidate (upsert target)
    user_id: uuid.UUID = Field(
        sa_column=Column(PG_UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, unique=True)
    )

    application_id: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(PG_UUID(as_uuid=True), ForeignKey("applications.id"), nullable=True)
    )

    post_id: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(PG_UUID(as_uuid=True), ForeignKey("posts.id"), nullable=True)
    )

    first_name: str = Field(sa_column=Column(String, nullable=False))
    middle_name: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    last_name: str = Field(sa_column=Column(String, nullable=False))
    father_name: str = Field(sa_column=Column(String, nullable=False))
    mother_name: str = Field(sa_column=Column(String, nullable=False))

    date_of_birth: date = Field(sa_column=Column(Date, nullable=False))
    gender: str = Field(sa_column=Column(String, nullable=False))
    category: str = Field(sa_column=Column(String, nullable=False))

    aadhar_number: str = Field(sa_column=Column(String, nullable=False))

    address: str = Field(sa_column=Column(Text, nullable=False))
    state: str = Field(default="Jharkhand", sa_column=Column(String, nullable=False))
    district: str = Field(sa_column=Column(String, nullable=False))
    pincode: str = Field(sa_column=Column(String, nullable=False))

    alternative_mobile: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )

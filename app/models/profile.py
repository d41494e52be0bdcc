# app/models/profile.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy import Boolean, DateTime, ForeignKey, String
from datetime import datetime
from typing import Optional
import uuid


class Profile(SQLModel, table=True):
    __tablename__ = "profiles"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(PG_UUID(as_uuid=True), primary_key=True)
    )

    user_id: uuid.UUID = Field(
        sa_column=Column(PG_UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, unique=True)
    )

    full_name: str = Field(sa_column=Column(String, nullable=False))

    mobile_number: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )

    phone_verified: bool = Field(
        default=False, sa_column=Column(Boolean, nullable=False, default=False)
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class PhoneOtp(SQLModel, table=True):
    __tablename__ = "phone_otps"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(PG_UUID(as_uuid=True), primary_key=True)
    )

    user_id: uuid.UUID = Field(
        sa_column=Column(PG_UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    )

    mobile: str = Field(sa_column=Column(String, nullable=False))
    code: str = Field(sa_column=Column(String, nullable=False))
    purpose: str = Field(default="registration", sa_column=Column(String, nullable=False))

    used: bool = Field(
        default=False, sa_column=Column(Boolean, nullable=False, default=False)
    )

    expires_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )

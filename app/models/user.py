# app/models/user.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy import DateTime, String
from sqlalchemy import Enum as PGEnum
from datetime import datetime
import uuid
from enum import Enum


class UserRole(str, Enum):
    Admin = "Admin"
    Candidate = "Candidate"


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(PG_UUID(as_uuid=True), primary_key=True)
    )

    name: str = Field(sa_column=Column(String, nullable=False))
    email: str = Field(sa_column=Column(String, nullable=False, index=True, unique=True))
    password_hash: str = Field(sa_column=Column(String, nullable=False))

    role: UserRole = Field(
        sa_column=Column(PGEnum(UserRole, name="user_role"), nullable=False)
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )

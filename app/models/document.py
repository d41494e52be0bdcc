from sqlmodel import SQLModel, Field, Column
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy import BigInteger, DateTime, ForeignKey, String, Text
from datetime import datetime
from typing import Optional
import uuid


class Document(SQLModel, table=True):
    __tablename__ = "documents"

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

    document_type: str = Field(sa_column=Column(String, nullable=False))

    file_url: str = Field(sa_column=Column(Text, nullable=False))
    file_path: str = Field(sa_column=Column(Text, nullable=False))
    file_name: str = Field(sa_column=Column(String, nullable=False))
    file_size: int = Field(sa_column=Column(BigInteger, nullable=False))
    mime_type: str = Field(sa_column=Column(String, nullable=False))

    status: str = Field(default="uploaded", sa_column=Column(String, nullable=False))

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )

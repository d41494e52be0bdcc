from sqlmodel import SQLModel, Field, Column
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy import Boolean, DateTime, Integer, Numeric, String
from datetime import datetime
from decimal import Decimal
import uuid


class Post(SQLModel, table=True):
    __tablename__ = "posts"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(PG_UUID(as_uuid=True), primary_key=True)
    )

    post_name: str = Field(sa_column=Column(String, nullable=False))
    post_code: str = Field(sa_column=Column(String, nullable=False, unique=True))

    is_active: bool = Field(
        default=True, sa_column=Column(Boolean, nullable=False, default=True)
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class CategoryPayment(SQLModel, table=True):
    __tablename__ = "category_payments"

    id: int | None = Field(
        default=None,
        sa_column=Column(Integer, primary_key=True, autoincrement=True)
    )

    # lowercase fee category: general / obc / sc / st / ews
    category: str = Field(sa_column=Column(String, nullable=False, unique=True))

    amount: Decimal = Field(
        default=Decimal("0"), sa_column=Column(Numeric(10, 2), nullable=False)
    )

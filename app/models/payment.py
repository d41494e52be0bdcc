# app/models/payment.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy import DateTime, ForeignKey, Numeric, String
from sqlalchemy import Enum as PGEnum
from datetime import datetime
from decimal import Decimal
from typing import Optional
import uuid

from app.models.enums import PaymentStatus


class Payment(SQLModel, table=True):
    """
    Append-only: every checkout callback inserts a new row and the most
    recently created row is the authoritative status for the application.
    """
    __tablename__ = "payments"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(PG_UUID(as_uuid=True), primary_key=True)
    )

    application_id: uuid.UUID = Field(
        sa_column=Column(PG_UUID(as_uuid=True), ForeignKey("applications.id"), nullable=False, index=True)
    )

    amount: Decimal = Field(
        default=Decimal("0"), sa_column=Column(Numeric(10, 2), nullable=False)
    )

    payment_status: PaymentStatus = Field(
        default=PaymentStatus.Pending,
        sa_column=Column(
            PGEnum(
                PaymentStatus,
                name="payment_status",
                values_callable=lambda e: [m.value for m in e],
            ),
            nullable=False,
        )
    )

    payment_method: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    transaction_id: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))

    payment_date: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(timezone=True), nullable=True)
    )

    # Checkout confirmation payload, stored verbatim
    razorpay_order_id: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    razorpay_payment_id: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    razorpay_signature: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )

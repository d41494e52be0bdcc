from pydantic import BaseModel
from typing import Optional
from uuid import UUID
from datetime import datetime
from decimal import Decimal

from app.models.enums import PaymentStatus
from app.schemas.wizard import WizardStateRead


class PaymentRead(BaseModel):
    id: UUID
    application_id: UUID
    amount: Decimal
    payment_status: PaymentStatus
    payment_method: Optional[str]
    transaction_id: Optional[str]
    payment_date: Optional[datetime]
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class CheckoutPrefill(BaseModel):
    name: str
    email: str
    contact: str


class PaymentSummary(BaseModel):
    application_id: UUID
    category: str
    fee_category: str
    amount: Decimal
    is_exempted: bool
    payment_status: str
    payment: Optional[PaymentRead] = None
    checkout_key: Optional[str] = None
    prefill: CheckoutPrefill


class CheckoutSuccessRequest(BaseModel):
    """Checkout widget confirmation payload, persisted as received."""
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: str
    razorpay_signature: Optional[str] = None


class CheckoutFailureRequest(BaseModel):
    dismissed: bool = False
    code: Optional[str] = None
    description: Optional[str] = None


class CheckoutSuccessResponse(BaseModel):
    payment: PaymentRead
    wizard: WizardStateRead
    message: str = "Your payment has been recorded successfully."

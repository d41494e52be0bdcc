# app/services/payment_service.py

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from loguru import logger
from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.constants import FEE_CATEGORY_ALIASES, PAYMENT_STEP
from app.core.events import PaymentCompleted, PaymentCompletionBus
from app.core.exceptions import (
    NotFoundError,
    PaymentError,
    PersistenceError,
)
from app.models.enums import ApplicationStatus, PaymentMethod, PaymentStatus
from app.models.payment import Payment
from app.models.post import CategoryPayment
from app.models.profile import Profile
from app.models.user import User
from app.schemas.payment import CheckoutFailureRequest, CheckoutSuccessRequest
from app.services.registration_service import (
    advance_status,
    ensure_writable,
    load_registration_data,
)
from app.services.wizard import RegistrationSnapshot


# ------------------------------------------------------------
# FEES
# ------------------------------------------------------------
def map_fee_category(category: Optional[str]) -> str:
    """personal_info.category -> category_payments.category"""
    key = (category or "").strip().lower()
    return FEE_CATEGORY_ALIASES.get(key, key)


async def get_category_fee(session: AsyncSession, category: Optional[str]) -> Decimal:
    result = await session.execute(
        select(CategoryPayment.amount).where(CategoryPayment.category == map_fee_category(category))
    )
    amount = result.scalar_one_or_none()
    return Decimal(amount) if amount is not None else Decimal("0")


async def list_payments(session: AsyncSession, application_id: uuid.UUID) -> list[Payment]:
    result = await session.execute(
        select(Payment)
        .where(Payment.application_id == application_id)
        .order_by(Payment.created_at.desc())
    )
    return list(result.scalars().all())


def _require_application(snapshot: RegistrationSnapshot):
    if snapshot.application is None:
        raise NotFoundError("Please complete your personal information first")
    return snapshot.application


# ------------------------------------------------------------
# EXEMPTION
# ------------------------------------------------------------
async def ensure_exemption(session: AsyncSession, snapshot: RegistrationSnapshot) -> Optional[Payment]:
    """
    Records the waived fee for an exempt category the first time the payment
    step is viewed. Returns the new row, or None when nothing was inserted.
    """
    if not snapshot.is_exempt or snapshot.application is None:
        return None

    application = snapshot.application
    existing = await session.execute(
        select(Payment.id).where(
            Payment.application_id == application.id,
            Payment.payment_method == PaymentMethod.Exempted.value,
        ).limit(1)
    )
    if existing.scalar_one_or_none() is not None:
        return None

    payment = Payment(
        application_id=application.id,
        amount=Decimal("0"),
        payment_status=PaymentStatus.Completed,
        payment_method=PaymentMethod.Exempted.value,
        payment_date=datetime.utcnow(),
    )
    session.add(payment)
    advance_status(application, ApplicationStatus.PaymentCompleted)
    session.add(application)

    try:
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Failed to record fee exemption for {application.id}: {e}")
        raise PersistenceError("Please try again")

    await session.refresh(payment)
    snapshot.latest_payment = payment
    logger.info(f"Fee exemption recorded for application {application.id} ({snapshot.category})")
    return payment


# ------------------------------------------------------------
# SUMMARY (payment step view)
# ------------------------------------------------------------
async def get_payment_summary(session: AsyncSession, user: User) -> dict:
    snapshot = await load_registration_data(session, user.id)
    application = _require_application(snapshot)

    if not snapshot.is_submitted:
        ensure_writable(snapshot, PAYMENT_STEP)
        await ensure_exemption(session, snapshot)

    amount = Decimal("0") if snapshot.is_exempt else await get_category_fee(session, snapshot.category)

    profile = (
        await session.execute(select(Profile).where(Profile.user_id == user.id))
    ).scalar_one_or_none()

    personal = snapshot.personal_info
    name = " ".join(filter(None, [personal.first_name, personal.last_name])) if personal else user.name
    contact = (profile.mobile_number if profile else None) or (personal.alternative_mobile if personal else None)

    latest = snapshot.latest_payment
    payment_status = latest.payment_status if latest else PaymentStatus.Pending

    return {
        "application_id": application.id,
        "category": snapshot.category or "",
        "fee_category": map_fee_category(snapshot.category),
        "amount": amount,
        "is_exempted": snapshot.is_exempt,
        "payment_status": getattr(payment_status, "value", payment_status),
        "payment": latest,
        "checkout_key": settings.RAZORPAY_KEY_ID,
        "prefill": {"name": name, "email": user.email, "contact": contact or ""},
    }


# ------------------------------------------------------------
# CHECKOUT CALLBACKS
# ------------------------------------------------------------
async def record_checkout_success(
    session: AsyncSession,
    user: User,
    payload: CheckoutSuccessRequest,
    bus: PaymentCompletionBus,
) -> Payment:
    """
    Appends a completed payment with the checkout confirmation as received,
    then notifies payment-completion subscribers for the application.
    """
    snapshot = await load_registration_data(session, user.id)
    application = _require_application(snapshot)
    ensure_writable(snapshot, PAYMENT_STEP)

    payment = Payment(
        application_id=application.id,
        amount=await get_category_fee(session, snapshot.category),
        payment_status=PaymentStatus.Completed,
        payment_method=PaymentMethod.Razorpay.value,
        transaction_id=payload.razorpay_payment_id,
        payment_date=datetime.utcnow(),
        razorpay_order_id=payload.razorpay_order_id,
        razorpay_payment_id=payload.razorpay_payment_id,
        razorpay_signature=payload.razorpay_signature,
    )
    session.add(payment)
    advance_status(application, ApplicationStatus.PaymentCompleted)
    session.add(application)

    try:
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Failed to record payment for {application.id}: {e}")
        raise PersistenceError("Payment was received but could not be recorded. Please contact support.")

    await session.refresh(payment)
    logger.success(f"Payment {payment.transaction_id} recorded for application {application.id}")

    await bus.publish(
        PaymentCompleted(
            application_id=application.id,
            payment_id=payment.id,
            method=PaymentMethod.Razorpay.value,
        )
    )
    return payment


def checkout_failure_notice(payload: CheckoutFailureRequest) -> PaymentError:
    """Nothing is persisted for a failed or dismissed checkout."""
    if payload.dismissed:
        return PaymentError("Payment was cancelled. You can try again.", title="Payment Cancelled")

    description = payload.description or "Payment could not be completed. Please try again."
    if payload.code:
        logger.warning(f"Checkout failed with code {payload.code}: {description}")
    return PaymentError(description)

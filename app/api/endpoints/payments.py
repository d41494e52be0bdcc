# app/api/endpoints/payments.py

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session, get_payment_events
from app.core.events import PaymentCompletionBus
from app.core.exceptions import to_http
from app.core.rbac import require_verified_candidate
from app.models.enums import AuditAction
from app.models.user import User, UserRole
from app.schemas.payment import (
    CheckoutFailureRequest,
    CheckoutSuccessRequest,
    CheckoutSuccessResponse,
    PaymentSummary,
)
from app.services.audit_service import log_activity
from app.services.payment_service import (
    checkout_failure_notice,
    get_payment_summary,
    record_checkout_success,
)
from app.services.registration_service import build_wizard

router = APIRouter(
    prefix="/api/payments",
    tags=["Payments"]
)


# ------------------------------------------------------------
# PAYMENT STEP VIEW
# ------------------------------------------------------------
@router.get("/summary", response_model=PaymentSummary)
async def payment_summary(
    current_user: User = Depends(require_verified_candidate),
    session: AsyncSession = Depends(get_db_session),
):
    """
    Fee for the candidate's category. For SC/ST candidates the first view
    records the waived fee as a completed zero-amount payment.
    """
    try:
        return await get_payment_summary(session, current_user)
    except ValueError as e:
        raise to_http(e)


# ------------------------------------------------------------
# CHECKOUT CALLBACKS
# ------------------------------------------------------------
@router.post("/checkout-success", response_model=CheckoutSuccessResponse)
async def checkout_success(
    payload: CheckoutSuccessRequest,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(require_verified_candidate),
    session: AsyncSession = Depends(get_db_session),
    bus: PaymentCompletionBus = Depends(get_payment_events),
):
    wizard = await build_wizard(session, current_user.id)
    wizard.attach(bus)
    try:
        payment = await record_checkout_success(session, current_user, payload, bus)
    except ValueError as e:
        raise to_http(e)
    finally:
        wizard.detach()

    background_tasks.add_task(
        log_activity,
        action=AuditAction.PaymentCompleted.value,
        actor_id=current_user.id,
        actor_role=UserRole.Candidate.value,
        actor_name=current_user.name,
        application_id=payment.application_id,
        details={
            "amount": str(payment.amount),
            "razorpay_payment_id": payment.razorpay_payment_id,
        },
    )

    return {"payment": payment, "wizard": wizard.state()}


@router.post("/checkout-failure")
async def checkout_failure(
    payload: CheckoutFailureRequest,
    current_user: User = Depends(require_verified_candidate),
):
    raise to_http(checkout_failure_notice(payload))

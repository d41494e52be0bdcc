# app/api/endpoints/phone.py

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session
from app.core.exceptions import to_http
from app.core.rate_limiter import OTP_SEND_LIMIT, OTP_VERIFY_LIMIT, candidate_key, limiter
from app.core.rbac import require_candidate
from app.core.config import settings
from app.models.user import User
from app.schemas.phone import SendOtpRequest, VerifyOtpRequest
from app.schemas.user import ProfileRead
from app.services.phone_service import send_phone_otp, verify_phone_otp

router = APIRouter(
    prefix="/api/phone",
    tags=["Phone Verification"]
)


# ------------------------------------------------------------
# SEND / RESEND OTP
# ------------------------------------------------------------
@router.post("/send-otp")
@limiter.limit(OTP_SEND_LIMIT, key_func=candidate_key)
async def send_otp(
    request: Request,
    payload: SendOtpRequest,
    current_user: User = Depends(require_candidate),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        await send_phone_otp(session, current_user.id, payload.mobile)
    except ValueError as e:
        raise to_http(e)

    return {
        "title": "OTP Sent Successfully",
        "description": f"Verification code sent to {payload.mobile}",
        "expires_in": settings.OTP_EXPIRE_MINUTES * 60,
    }


# ------------------------------------------------------------
# VERIFY OTP
# ------------------------------------------------------------
@router.post("/verify-otp", response_model=ProfileRead)
@limiter.limit(OTP_VERIFY_LIMIT, key_func=candidate_key)
async def verify_otp(
    request: Request,
    payload: VerifyOtpRequest,
    current_user: User = Depends(require_candidate),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        return await verify_phone_otp(session, current_user.id, payload.mobile, payload.code)
    except ValueError as e:
        raise to_http(e)

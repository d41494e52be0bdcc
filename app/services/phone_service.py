# app/services/phone_service.py

import secrets
from datetime import datetime, timedelta
from uuid import UUID

import httpx
from loguru import logger
from sqlmodel import select
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import PortalError
from app.models.profile import PhoneOtp, Profile


def generate_otp() -> str:
    return f"{secrets.randbelow(900000) + 100000}"


# ---------------------------------------------------------
# SMS GATEWAY
# ---------------------------------------------------------
async def send_sms(mobile: str, message: str) -> bool:
    """
    Posts a text message to the configured SMS gateway.
    Returns False when the gateway rejects the request or is unreachable.
    """
    if not settings.SMS_API_URL or not settings.SMS_API_KEY:
        logger.warning("SMS gateway not configured. Skipping SMS to {}", mobile)
        return True

    payload = {
        "sender": settings.SMS_SENDER_ID,
        "to": mobile,
        "message": message,
    }
    headers = {"Authorization": f"Bearer {settings.SMS_API_KEY}"}

    async with httpx.AsyncClient(timeout=10) as client:
        try:
            response = await client.post(settings.SMS_API_URL, json=payload, headers=headers)
            response.raise_for_status()
            return True
        except httpx.HTTPError as e:
            logger.error(f"SMS gateway error for {mobile}: {e}")
            return False


# ---------------------------------------------------------
# SEND OTP
# ---------------------------------------------------------
async def send_phone_otp(session: AsyncSession, user_id: UUID, mobile: str) -> PhoneOtp:
    otp = PhoneOtp(
        user_id=user_id,
        mobile=mobile,
        code=generate_otp(),
        purpose="registration",
        expires_at=datetime.utcnow() + timedelta(minutes=settings.OTP_EXPIRE_MINUTES),
    )

    message = (
        f"{otp.code} is your verification code for exam registration. "
        f"Valid for {settings.OTP_EXPIRE_MINUTES} minutes."
    )
    # nothing is written until the gateway accepts the message,
    # so a failed resend leaves the previous code usable
    if not await send_sms(mobile, message):
        raise PortalError("Please try again or contact support", title="Failed to Send OTP")

    await session.execute(
        update(PhoneOtp)
        .where(PhoneOtp.user_id == user_id, PhoneOtp.mobile == mobile, PhoneOtp.used == False)  # noqa: E712
        .values(used=True)
    )
    session.add(otp)

    profile = (
        await session.execute(select(Profile).where(Profile.user_id == user_id))
    ).scalar_one_or_none()
    if profile:
        profile.mobile_number = mobile
        session.add(profile)

    await session.commit()
    await session.refresh(otp)

    logger.info(f"OTP sent to {mobile} for user {user_id}")
    return otp


# ---------------------------------------------------------
# VERIFY OTP
# ---------------------------------------------------------
async def verify_phone_otp(session: AsyncSession, user_id: UUID, mobile: str, code: str) -> Profile:
    result = await session.execute(
        select(PhoneOtp)
        .where(
            PhoneOtp.user_id == user_id,
            PhoneOtp.mobile == mobile,
            PhoneOtp.code == code,
            PhoneOtp.used == False,  # noqa: E712
            PhoneOtp.expires_at >= datetime.utcnow(),
        )
        .order_by(PhoneOtp.created_at.desc())
        .limit(1)
    )
    otp = result.scalar_one_or_none()

    if not otp:
        raise PortalError("Please check the code or request a new one", title="Invalid or Expired OTP")

    otp.used = True
    session.add(otp)

    profile = (
        await session.execute(select(Profile).where(Profile.user_id == user_id))
    ).scalar_one_or_none()
    if not profile:
        raise PortalError("Profile not found", title="Verification Failed")

    profile.phone_verified = True
    profile.mobile_number = mobile
    session.add(profile)

    await session.commit()
    await session.refresh(profile)

    logger.success(f"Phone {mobile} verified for user {user_id}")
    return profile

# app/services/application_service.py

import time
import uuid
from datetime import datetime
from typing import Optional

from loguru import logger
from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from app.core.constants import APPLICATION_NUMBER_PREFIX, APPLICATION_NUMBER_SUFFIX_DIGITS
from app.core.exceptions import NotFoundError, SubmissionError
from app.models.application import Application
from app.models.enums import ApplicationStatus
from app.models.post import Post


# ---------------------------------------
# APPLICATION NUMBER
# ---------------------------------------
def generate_application_number(now: Optional[datetime] = None, epoch_ms: Optional[int] = None) -> str:
    """
    REG<year><last 7 digits of the current epoch milliseconds>,
    e.g. REG20261234567
    """
    now = now or datetime.now()
    if epoch_ms is None:
        epoch_ms = int(time.time() * 1000)
    suffix = str(epoch_ms)[-APPLICATION_NUMBER_SUFFIX_DIGITS:].zfill(APPLICATION_NUMBER_SUFFIX_DIGITS)
    return f"{APPLICATION_NUMBER_PREFIX}{now.year}{suffix}"


# ---------------------------------------
# FINAL SUBMISSION
# ---------------------------------------
async def submit_application(session: AsyncSession, application: Application) -> Application:
    """
    Single update of the application row: number, status and timestamp.
    One-way; callers check the submitted lock before getting here.
    """
    now = datetime.utcnow()

    application.application_number = generate_application_number()
    application.status = ApplicationStatus.Submitted
    application.submitted_at = now
    application.updated_at = now

    session.add(application)

    try:
        await session.commit()
        await session.refresh(application)
    except IntegrityError as e:
        await session.rollback()
        logger.error(f"IntegrityError while submitting application {application.id}: {e}")
        raise SubmissionError("Failed to submit application")

    logger.success(f"Application {application.id} submitted as {application.application_number}")
    return application


# ---------------------------------------
# LOOKUPS
# ---------------------------------------
async def get_application(session: AsyncSession, application_id: uuid.UUID) -> Application:
    result = await session.execute(select(Application).where(Application.id == application_id))
    application = result.scalar_one_or_none()
    if not application:
        raise NotFoundError("Application not found")
    return application


async def get_post(session: AsyncSession, post_id: Optional[uuid.UUID]) -> Optional[Post]:
    if post_id is None:
        return None
    result = await session.execute(select(Post).where(Post.id == post_id))
    return result.scalar_one_or_none()


async def list_active_posts(session: AsyncSession) -> list[Post]:
    result = await session.execute(
        select(Post).where(Post.is_active == True).order_by(Post.post_name)  # noqa: E712
    )
    return list(result.scalars().all())

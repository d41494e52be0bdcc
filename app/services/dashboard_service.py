# app/services/dashboard_service.py

import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.application import Application
from app.models.enums import ApplicationStatus, PaymentStatus
from app.models.payment import Payment
from app.models.post import Post
from app.models.profile import Profile
from app.models.user import User, UserRole
from app.services.audit_service import get_audit_trail
from app.services.registration_service import load_registration_data
from app.services.wizard import derive_completed_steps


# ============================================================================
# CANDIDATE DASHBOARD
# ============================================================================
def completion_percentage(
    applications: list[Application],
    has_personal_info: bool,
    has_documents: bool,
    has_payment: bool,
) -> float:
    """
    100 once any application is paid for or submitted; otherwise 25 for each
    of personal info, documents, an application and a payment.
    """
    finished = {ApplicationStatus.Submitted, ApplicationStatus.PaymentCompleted}
    if any(ApplicationStatus(a.status) in finished for a in applications):
        return 100.0

    parts = [has_personal_info, has_documents, bool(applications), has_payment]
    return float(25 * sum(1 for present in parts if present))


async def get_candidate_dashboard(session: AsyncSession, user: User) -> dict:
    profile = (
        await session.execute(select(Profile).where(Profile.user_id == user.id))
    ).scalar_one_or_none()

    snapshot = await load_registration_data(session, user.id)

    app_rows = await session.execute(
        select(Application, Post)
        .outerjoin(Post, Application.post_id == Post.id)
        .where(Application.user_id == user.id)
        .order_by(Application.created_at.desc())
    )
    applications = []
    application_models = []
    for application, post in app_rows.all():
        application_models.append(application)
        applications.append({**application.model_dump(), "post": post})

    payments: list[Payment] = []
    if application_models:
        payments = list((
            await session.execute(
                select(Payment)
                .where(Payment.application_id.in_([a.id for a in application_models]))
                .order_by(Payment.created_at.desc())
            )
        ).scalars().all())

    return {
        "profile": profile,
        "personal_info": snapshot.personal_info,
        "applications": applications,
        "documents": snapshot.documents,
        "payments": payments,
        "mobile_verified": bool(profile and profile.phone_verified),
        "has_submitted_application": any(
            ApplicationStatus(a.status) == ApplicationStatus.Submitted for a in application_models
        ),
        "completion_percentage": completion_percentage(
            application_models,
            has_personal_info=snapshot.personal_info is not None,
            has_documents=bool(snapshot.documents),
            has_payment=bool(payments),
        ),
    }


# ============================================================================
# ADMIN DASHBOARD
# ============================================================================
async def get_admin_stats(session: AsyncSession) -> dict:
    status_res = await session.execute(
        select(Application.status, func.count(Application.id)).group_by(Application.status)
    )
    by_status = {s.value: 0 for s in ApplicationStatus}
    for status_value, count in status_res.all():
        by_status[ApplicationStatus(status_value).value] = count

    candidates = await session.execute(
        select(func.count(User.id)).where(User.role == UserRole.Candidate)
    )

    collected = await session.execute(
        select(func.coalesce(func.sum(Payment.amount), 0)).where(
            Payment.payment_status == PaymentStatus.Completed
        )
    )

    return {
        "total_applications": sum(by_status.values()),
        "by_status": by_status,
        "total_candidates": candidates.scalar_one(),
        "total_fee_collected": float(Decimal(str(collected.scalar_one() or 0))),
    }


async def list_applications_for_admin(
    session: AsyncSession,
    status: Optional[ApplicationStatus] = None,
    post_id: Optional[uuid.UUID] = None,
    page: int = 1,
    page_size: int = 20,
) -> dict:
    filters = []
    if status is not None:
        filters.append(Application.status == status)
    if post_id is not None:
        filters.append(Application.post_id == post_id)

    total = (
        await session.execute(select(func.count(Application.id)).where(*filters))
    ).scalar_one()

    rows = await session.execute(
        select(Application, User.name, User.email, Post.post_name)
        .join(User, Application.user_id == User.id)
        .outerjoin(Post, Application.post_id == Post.id)
        .where(*filters)
        .order_by(Application.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    items = [
        {
            **application.model_dump(),
            "candidate_name": name,
            "candidate_email": email,
            "post_name": post_name,
        }
        for application, name, email, post_name in rows.all()
    ]

    return {"total": total, "page": page, "page_size": page_size, "items": items}


async def get_application_detail(session: AsyncSession, application_id: uuid.UUID) -> dict:
    row = (
        await session.execute(
            select(Application, Post)
            .outerjoin(Post, Application.post_id == Post.id)
            .where(Application.id == application_id)
        )
    ).first()
    if not row:
        raise NotFoundError("Application not found")
    application, post = row

    snapshot = await load_registration_data(session, application.user_id)

    profile = (
        await session.execute(select(Profile).where(Profile.user_id == application.user_id))
    ).scalar_one_or_none()

    payments = (
        await session.execute(
            select(Payment)
            .where(Payment.application_id == application.id)
            .order_by(Payment.created_at.desc())
        )
    ).scalars().all()

    return {
        "application": {**application.model_dump(), "post": post},
        "candidate": profile,
        "personal_info": snapshot.personal_info,
        "other_details": snapshot.other_details,
        "education": snapshot.education,
        "experience": snapshot.experience,
        "documents": snapshot.documents,
        "payments": list(payments),
        "completed_steps": sorted(derive_completed_steps(snapshot)),
        "audit_trail": await get_audit_trail(session, application.id),
    }

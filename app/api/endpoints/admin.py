# app/api/endpoints/admin.py

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from uuid import UUID

from app.api.deps import get_db_session
from app.core.exceptions import to_http
from app.core.rate_limiter import LOGIN_LIMIT, limiter
from app.core.rbac import require_admin
from app.models.enums import ApplicationStatus
from app.models.user import User, UserRole
from app.schemas.application import AdminApplicationDetail, AdminApplicationList, AdminStats
from app.schemas.auth import LoginRequest, TokenWithUser
from app.services.auth_service import authenticate_user, create_login_response
from app.services.dashboard_service import (
    get_admin_stats,
    get_application_detail,
    list_applications_for_admin,
)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


# -------------------------------------------------------------------
# LOGIN (Admin login)
# -------------------------------------------------------------------
@router.post("/login", response_model=TokenWithUser)
@limiter.limit(LOGIN_LIMIT)
async def login(
    request: Request,
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db_session)
):
    user = await authenticate_user(session, payload.email, payload.password)

    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if user.role != UserRole.Admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")

    return await create_login_response(user, session)


# -------------------------------------------------------------------
# DASHBOARD STATS
# -------------------------------------------------------------------
@router.get("/dashboard/stats", response_model=AdminStats)
async def dashboard_stats(
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_admin),
):
    return await get_admin_stats(session)


# -------------------------------------------------------------------
# APPLICATIONS
# -------------------------------------------------------------------
@router.get("/applications", response_model=AdminApplicationList)
async def list_applications(
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
    post_id: Optional[UUID] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_admin),
):
    return await list_applications_for_admin(
        session,
        status=status_filter,
        post_id=post_id,
        page=page,
        page_size=page_size,
    )


@router.get("/applications/{application_id}", response_model=AdminApplicationDetail)
async def application_detail(
    application_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_admin),
):
    try:
        return await get_application_detail(session, application_id)
    except ValueError as e:
        raise to_http(e)

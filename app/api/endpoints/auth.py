# app/api/endpoints/auth.py

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session, get_current_user
from app.core.rate_limiter import LOGIN_LIMIT, limiter
from app.models.enums import AuditAction
from app.models.user import User, UserRole
from app.schemas.auth import LoginRequest, SignupRequest, TokenWithUser
from app.services.audit_service import log_activity
from app.services.auth_service import (
    authenticate_user,
    create_login_response,
    register_candidate,
)
from app.services.email_service import send_welcome_email

router = APIRouter(prefix="/api/auth", tags=["Auth (Candidate)"])


# -------------------------------------------------------------------
# SIGN-UP (Public)
# -------------------------------------------------------------------
@router.post("/signup", response_model=TokenWithUser, status_code=status.HTTP_201_CREATED)
@limiter.limit(LOGIN_LIMIT)
async def signup(
    request: Request,
    payload: SignupRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_db_session),
):
    try:
        user, _profile = await register_candidate(
            session,
            full_name=payload.full_name,
            email=payload.email,
            password=payload.password,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    background_tasks.add_task(send_welcome_email, {"name": user.name, "email": user.email})
    background_tasks.add_task(
        log_activity,
        action=AuditAction.CandidateSignup.value,
        actor_id=user.id,
        actor_role=UserRole.Candidate.value,
        actor_name=user.name,
    )

    return await create_login_response(user, session)


# -------------------------------------------------------------------
# LOGIN (Candidate)
# -------------------------------------------------------------------
@router.post("/login", response_model=TokenWithUser)
@limiter.limit(LOGIN_LIMIT)
async def login(
    request: Request,
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db_session),
):
    user = await authenticate_user(session, payload.email, payload.password)

    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if user.role != UserRole.Candidate:
        raise HTTPException(status_code=403, detail="Please use the admin login")

    return await create_login_response(user, session)


# -------------------------------------------------------------------
# CURRENT SESSION
# -------------------------------------------------------------------
@router.get("/me", response_model=TokenWithUser)
async def me(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await create_login_response(current_user, session)

# app/services/auth_service.py

from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
import uuid

from app.models.user import User, UserRole
from app.models.profile import Profile
from app.core.config import settings
from app.core.security import (
    hash_password,
    verify_password,
    create_access_token,
)
from app.schemas.auth import TokenWithUser
from app.schemas.user import UserRead, ProfileRead


# ============================================================================
# FETCH USER BY EMAIL
# ============================================================================
async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


# ============================================================================
# FETCH USER BY ID
# ============================================================================
async def get_user_by_id(session: AsyncSession, user_id) -> User | None:
    try:
        user_uuid = user_id if isinstance(user_id, uuid.UUID) else uuid.UUID(str(user_id))
    except ValueError:
        return None
    result = await session.execute(select(User).where(User.id == user_uuid))
    return result.scalar_one_or_none()


async def get_profile(session: AsyncSession, user_id: uuid.UUID) -> Profile | None:
    result = await session.execute(select(Profile).where(Profile.user_id == user_id))
    return result.scalar_one_or_none()


# ============================================================================
# CREATE USER
# ============================================================================
async def create_user(
    session: AsyncSession,
    name: str,
    email: str,
    password: str,
    role: UserRole,
    commit: bool = True,
) -> User:

    user = User(
        id=uuid.uuid4(),
        name=name,
        email=email.lower(),
        password_hash=hash_password(password),
        role=role,
    )

    session.add(user)

    if not commit:
        return user

    try:
        await session.commit()
        await session.refresh(user)
        return user

    except IntegrityError:
        await session.rollback()
        raise ValueError("User with this email already exists")


# ============================================================================
# CANDIDATE SIGN-UP (user + profile in one transaction)
# ============================================================================
async def register_candidate(
    session: AsyncSession,
    full_name: str,
    email: str,
    password: str,
) -> tuple[User, Profile]:

    if await get_user_by_email(session, email):
        raise ValueError("User with this email already exists")

    user = await create_user(
        session, full_name, email, password, UserRole.Candidate, commit=False
    )
    profile = Profile(user_id=user.id, full_name=full_name)
    session.add(profile)

    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ValueError("User with this email already exists")

    await session.refresh(user)
    await session.refresh(profile)
    return user, profile


# ============================================================================
# AUTHENTICATE (any role)
# ============================================================================
async def authenticate_user(session: AsyncSession, email: str, password: str) -> User | None:
    user = await get_user_by_email(session, email)
    if not user:
        return None

    if not verify_password(password, user.password_hash):
        return None

    return user


# ============================================================================
# CREATE LOGIN RESPONSE
# ============================================================================
async def create_login_response(user: User, session: AsyncSession) -> TokenWithUser:
    role_str = (
        user.role.value.lower()
        if isinstance(user.role, UserRole)
        else str(user.role).lower()
    )

    token = create_access_token(subject=str(user.id), data={"role": role_str})

    profile = await get_profile(session, user.id)

    return TokenWithUser(
        access_token=token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserRead.model_validate(user),
        profile=ProfileRead.model_validate(profile) if profile else None,
    )

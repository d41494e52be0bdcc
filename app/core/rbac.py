# app/core/rbac.py

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.api.deps import get_current_user, get_db_session
from app.models.profile import Profile
from app.models.user import User, UserRole


def normalize_role(role) -> str:
    if isinstance(role, UserRole):
        return role.value.lower().strip()
    return str(role).lower().strip()


def AllowRoles(*allowed_roles, admin_bypass: bool = True):
    """
    Role gate for routers.
    - Accepts UserRole values or raw strings, case-insensitive
    - Admin passes every gate unless admin_bypass=False
      (candidate-only routes need a candidate's own application)
    """
    normalized_allowed = {normalize_role(r) for r in allowed_roles}

    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        user_role = normalize_role(current_user.role)

        if admin_bypass and user_role == normalize_role(UserRole.Admin):
            return current_user

        if user_role not in normalized_allowed:
            readable_role = (
                current_user.role.value if isinstance(current_user.role, UserRole)
                else str(current_user.role)
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied for role '{readable_role}'"
            )

        return current_user

    return role_checker


# ------------------------------------------------------------
# Exposed dependencies for routers
# ------------------------------------------------------------
require_admin = AllowRoles(UserRole.Admin)
require_candidate = AllowRoles(UserRole.Candidate, admin_bypass=False)


async def require_verified_candidate(
    current_user: User = Depends(require_candidate),
    session: AsyncSession = Depends(get_db_session),
) -> User:
    """Registration is open only after the candidate's phone is verified."""
    result = await session.execute(select(Profile).where(Profile.user_id == current_user.id))
    profile = result.scalar_one_or_none()

    if not profile or not profile.phone_verified:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "title": "Phone Verification Required",
                "description": "Please verify your mobile number before registering",
            },
        )

    return current_user

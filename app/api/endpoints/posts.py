from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.rate_limiter import POST_LISTING_LIMIT, limiter
from app.api.deps import get_db_session
from app.schemas.post import PostRead
from app.services.application_service import list_active_posts

router = APIRouter(
    prefix="/api/posts",
    tags=["Common / Metadata"]
)


# ----------------------------------------------------------
# ACTIVE POSTS (dropdown on the personal info step)
# ----------------------------------------------------------
@router.get("", response_model=List[PostRead])
@limiter.limit(POST_LISTING_LIMIT)
async def get_posts(
    request: Request,
    session: AsyncSession = Depends(get_db_session)
):
    return await list_active_posts(session)

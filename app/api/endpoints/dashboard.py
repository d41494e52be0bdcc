# app/api/endpoints/dashboard.py

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session
from app.core.rbac import require_candidate
from app.models.user import User
from app.schemas.application import CandidateDashboard
from app.services.dashboard_service import get_candidate_dashboard

router = APIRouter(
    prefix="/api/dashboard",
    tags=["Candidate Dashboard"]
)


@router.get("", response_model=CandidateDashboard)
async def candidate_dashboard(
    current_user: User = Depends(require_candidate),
    session: AsyncSession = Depends(get_db_session),
):
    # open before phone verification so the dashboard can prompt for it
    return await get_candidate_dashboard(session, current_user)

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.api.deps import get_db_session
from app.core.exceptions import to_http
from app.core.rbac import AllowRoles
from app.models.user import User, UserRole
from app.services.application_service import get_application
from app.services.pdf_service import generate_acknowledgement_pdf

router = APIRouter(
    prefix="/api/applications",
    tags=["Applications"]
)


# ------------------------------------------------------------
# ACKNOWLEDGEMENT SLIP (PDF)
# ------------------------------------------------------------
@router.get("/{application_id}/acknowledgement")
async def download_acknowledgement(
    application_id: UUID,
    current_user: User = Depends(AllowRoles(UserRole.Candidate)),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        application = await get_application(session, application_id)
    except ValueError as e:
        raise to_http(e)

    # candidates only see their own slip; admins pass through
    if current_user.role == UserRole.Candidate and application.user_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your application")

    try:
        file_name, pdf_bytes = await generate_acknowledgement_pdf(session, application.id)
    except ValueError as e:
        raise to_http(e)

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'}
    )

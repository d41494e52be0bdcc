# app/api/endpoints/registration.py

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID

from app.api.deps import get_db_session
from app.core.exceptions import to_http
from app.core.rbac import require_verified_candidate
from app.models.enums import ApplicationStatus, AuditAction
from app.models.user import User, UserRole
from app.schemas.registration import (
    PersonalInfoIn,
    PersonalInfoRead,
    OtherDetailsIn,
    OtherDetailsRead,
    EducationIn,
    EducationRead,
    ExperienceIn,
    ExperienceRead,
)
from app.schemas.wizard import (
    GoToStepRequest,
    NavigationRequest,
    NextRequest,
    SubmitResponse,
    WizardStateRead,
)
from app.services import registration_service as steps
from app.services.application_service import get_post, submit_application
from app.services.audit_service import log_activity
from app.services.email_service import send_application_submitted_email
from app.services.payment_service import ensure_exemption

router = APIRouter(
    prefix="/api/registration",
    tags=["Registration Wizard"]
)


# ===================================================================
# WIZARD NAVIGATION
# ===================================================================
@router.get("/state", response_model=WizardStateRead)
async def get_wizard_state(
    current_user: User = Depends(require_verified_candidate),
    session: AsyncSession = Depends(get_db_session),
):
    wizard = await steps.build_wizard(session, current_user.id)
    return wizard.state()


@router.post("/goto", response_model=WizardStateRead)
async def go_to_step(
    payload: GoToStepRequest,
    current_user: User = Depends(require_verified_candidate),
    session: AsyncSession = Depends(get_db_session),
):
    wizard = await steps.build_wizard(session, current_user.id)
    try:
        wizard.go_to_step(payload.step)
    except ValueError as e:
        raise to_http(e)
    return wizard.state()


@router.post("/next", response_model=WizardStateRead)
async def next_step(
    payload: NextRequest,
    current_user: User = Depends(require_verified_candidate),
    session: AsyncSession = Depends(get_db_session),
):
    wizard = await steps.build_wizard(session, current_user.id, other_details=payload.other_details)
    try:
        wizard.go_to_step(payload.current_step)
        await wizard.next()
    except ValueError as e:
        raise to_http(e)
    return wizard.state()


@router.post("/previous", response_model=WizardStateRead)
async def previous_step(
    payload: NavigationRequest,
    current_user: User = Depends(require_verified_candidate),
    session: AsyncSession = Depends(get_db_session),
):
    wizard = await steps.build_wizard(session, current_user.id)
    try:
        wizard.go_to_step(payload.current_step)
    except ValueError as e:
        raise to_http(e)
    wizard.previous()
    return wizard.state()


# ===================================================================
# FINAL SUBMISSION
# ===================================================================
@router.post("/submit", response_model=SubmitResponse)
async def submit(
    background_tasks: BackgroundTasks,
    current_user: User = Depends(require_verified_candidate),
    session: AsyncSession = Depends(get_db_session),
):
    wizard = await steps.build_wizard(session, current_user.id)

    async def submitter():
        # an exempt candidate may never have opened the payment summary
        await ensure_exemption(session, wizard.snapshot)
        return await submit_application(session, wizard.snapshot.application)

    try:
        application = await wizard.submit(submitter)
    except ValueError as e:
        raise to_http(e)

    post = await get_post(session, application.post_id)

    background_tasks.add_task(
        send_application_submitted_email,
        {
            "name": current_user.name,
            "email": current_user.email,
            "application_id": application.id,
            "application_number": application.application_number,
            "post_name": post.post_name if post else None,
            "submitted_at": application.submitted_at,
        },
    )
    background_tasks.add_task(
        log_activity,
        action=AuditAction.ApplicationSubmitted.value,
        actor_id=current_user.id,
        actor_role=UserRole.Candidate.value,
        actor_name=current_user.name,
        application_id=application.id,
        details={"application_number": application.application_number},
    )

    return SubmitResponse(
        application_id=application.id,
        application_number=application.application_number,
        status=ApplicationStatus(application.status).value,
        submitted_at=application.submitted_at,
    )


# ===================================================================
# STEP 1: PERSONAL INFO
# ===================================================================
@router.get("/personal-info", response_model=Optional[PersonalInfoRead])
async def get_personal_info(
    current_user: User = Depends(require_verified_candidate),
    session: AsyncSession = Depends(get_db_session),
):
    return await steps.get_personal_info(session, current_user.id)


@router.put("/personal-info", response_model=PersonalInfoRead)
async def save_personal_info(
    payload: PersonalInfoIn,
    current_user: User = Depends(require_verified_candidate),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        return await steps.save_personal_info(session, current_user.id, payload)
    except ValueError as e:
        raise to_http(e)


# ===================================================================
# STEP 2: OTHER DETAILS
# ===================================================================
@router.get("/other-details", response_model=Optional[OtherDetailsRead])
async def get_other_details(
    current_user: User = Depends(require_verified_candidate),
    session: AsyncSession = Depends(get_db_session),
):
    return await steps.get_other_details(session, current_user.id)


@router.put("/other-details", response_model=OtherDetailsRead)
async def save_other_details(
    payload: OtherDetailsIn,
    current_user: User = Depends(require_verified_candidate),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        return await steps.save_other_details(session, current_user.id, payload)
    except ValueError as e:
        raise to_http(e)


# ===================================================================
# STEP 3: EDUCATION
# ===================================================================
@router.get("/education", response_model=List[EducationRead])
async def list_education(
    current_user: User = Depends(require_verified_candidate),
    session: AsyncSession = Depends(get_db_session),
):
    return await steps.list_education(session, current_user.id)


@router.post("/education", response_model=EducationRead, status_code=status.HTTP_201_CREATED)
async def add_education(
    payload: EducationIn,
    current_user: User = Depends(require_verified_candidate),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        return await steps.add_education(session, current_user.id, payload)
    except ValueError as e:
        raise to_http(e)


@router.put("/education/{education_id}", response_model=EducationRead)
async def update_education(
    education_id: UUID,
    payload: EducationIn,
    current_user: User = Depends(require_verified_candidate),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        return await steps.update_education(session, current_user.id, education_id, payload)
    except ValueError as e:
        raise to_http(e)


@router.delete("/education/{education_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_education(
    education_id: UUID,
    current_user: User = Depends(require_verified_candidate),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        await steps.delete_education(session, current_user.id, education_id)
    except ValueError as e:
        raise to_http(e)


# ===================================================================
# STEP 4: EXPERIENCE
# ===================================================================
@router.get("/experience", response_model=List[ExperienceRead])
async def list_experience(
    current_user: User = Depends(require_verified_candidate),
    session: AsyncSession = Depends(get_db_session),
):
    return await steps.list_experience(session, current_user.id)


@router.post("/experience", response_model=ExperienceRead, status_code=status.HTTP_201_CREATED)
async def add_experience(
    payload: ExperienceIn,
    current_user: User = Depends(require_verified_candidate),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        return await steps.add_experience(session, current_user.id, payload)
    except ValueError as e:
        raise to_http(e)


@router.put("/experience/{experience_id}", response_model=ExperienceRead)
async def update_experience(
    experience_id: UUID,
    payload: ExperienceIn,
    current_user: User = Depends(require_verified_candidate),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        return await steps.update_experience(session, current_user.id, experience_id, payload)
    except ValueError as e:
        raise to_http(e)


@router.delete("/experience/{experience_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_experience(
    experience_id: UUID,
    current_user: User = Depends(require_verified_candidate),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        await steps.delete_experience(session, current_user.id, experience_id)
    except ValueError as e:
        raise to_http(e)

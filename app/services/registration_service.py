# app/services/registration_service.py

"""
Step persistence for the registration wizard.

Every write goes through the same gate as wizard navigation: the target step
must be reachable from the candidate's stored progress, and nothing may change
once the application has been submitted.
"""

import uuid
from datetime import datetime
from typing import Optional

from fastapi import UploadFile
from loguru import logger
from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from app.core.constants import (
    PERSONAL_INFO_STEP,
    OTHER_DETAILS_STEP,
    EDUCATION_STEP,
    EXPERIENCE_STEP,
    DOCUMENTS_STEP,
)
from app.core.exceptions import (
    ApplicationLocked,
    GatingViolation,
    NotFoundError,
    PersistenceError,
    PortalError,
)
from app.core.storage import (
    build_document_path,
    read_document_upload,
    upload_document,
    remove_document,
)
from app.models.application import Application
from app.models.document import Document
from app.models.education import EducationalQualification
from app.models.enums import APPLICATION_STATUS_ORDER, ApplicationStatus, DocumentStatus
from app.models.experience import ExperienceInfo
from app.models.other_details import OtherDetails
from app.models.payment import Payment
from app.models.personal_info import PersonalInfo
from app.models.post import Post
from app.schemas.registration import (
    PersonalInfoIn,
    OtherDetailsIn,
    EducationIn,
    ExperienceIn,
)
from app.services.wizard import (
    RegistrationSnapshot,
    RegistrationWizard,
    derive_completed_steps,
    gating_steps,
    max_allowed_step,
)


# ============================================================================
# LOADING
# ============================================================================
async def get_application_for_user(session: AsyncSession, user_id: uuid.UUID) -> Optional[Application]:
    result = await session.execute(
        select(Application)
        .where(Application.user_id == user_id)
        .order_by(Application.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def get_latest_payment(session: AsyncSession, application_id: uuid.UUID) -> Optional[Payment]:
    result = await session.execute(
        select(Payment)
        .where(Payment.application_id == application_id)
        .order_by(Payment.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def load_registration_data(session: AsyncSession, user_id: uuid.UUID) -> RegistrationSnapshot:
    """Reads every row the wizard derives its state from."""
    application = await get_application_for_user(session, user_id)

    personal_info = (
        await session.execute(select(PersonalInfo).where(PersonalInfo.user_id == user_id))
    ).scalar_one_or_none()

    other_details = (
        await session.execute(select(OtherDetails).where(OtherDetails.user_id == user_id))
    ).scalar_one_or_none()

    education = (
        await session.execute(
            select(EducationalQualification)
            .where(EducationalQualification.user_id == user_id)
            .order_by(EducationalQualification.created_at)
        )
    ).scalars().all()

    experience = (
        await session.execute(
            select(ExperienceInfo)
            .where(ExperienceInfo.user_id == user_id)
            .order_by(ExperienceInfo.created_at)
        )
    ).scalars().all()

    documents = (
        await session.execute(
            select(Document)
            .where(Document.user_id == user_id)
            .order_by(Document.created_at)
        )
    ).scalars().all()

    latest_payment = None
    if application is not None:
        latest_payment = await get_latest_payment(session, application.id)

    return RegistrationSnapshot(
        application=application,
        personal_info=personal_info,
        other_details=other_details,
        education=list(education),
        experience=list(experience),
        documents=list(documents),
        latest_payment=latest_payment,
    )


async def build_wizard(
    session: AsyncSession,
    user_id: uuid.UUID,
    other_details: Optional[OtherDetailsIn] = None,
) -> RegistrationWizard:
    """
    Wizard wired to this session. The only step saved from navigation is
    Other Details; the remaining steps persist through their own endpoints.
    """
    async def loader() -> RegistrationSnapshot:
        return await load_registration_data(session, user_id)

    async def save_step(step: int) -> None:
        if step != OTHER_DETAILS_STEP:
            return
        if other_details is not None:
            await save_other_details(session, user_id, other_details)
        elif wizard.snapshot.other_details is None:
            raise PortalError("Please enter nationality", title="Validation Error")

    wizard = RegistrationWizard(await loader(), loader=loader, save_step=save_step)
    return wizard


# ============================================================================
# GUARDS
# ============================================================================
def ensure_writable(snapshot: RegistrationSnapshot, step: int) -> None:
    """Rejects writes after submission and writes to a still-locked step."""
    if snapshot.is_submitted:
        raise ApplicationLocked("Submitted applications can no longer be edited")

    if step > max_allowed_step(gating_steps(derive_completed_steps(snapshot))):
        raise GatingViolation("Please complete the previous steps before proceeding")


def advance_status(application: Application, target: ApplicationStatus) -> bool:
    """Moves the application forward to ``target``; never moves it back."""
    current = ApplicationStatus(application.status)
    if APPLICATION_STATUS_ORDER.index(target) <= APPLICATION_STATUS_ORDER.index(current):
        return False

    application.status = target
    application.updated_at = datetime.utcnow()
    return True


async def _commit(session: AsyncSession, what: str) -> None:
    try:
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Failed to save {what}: {e}")
        raise PersistenceError("Please try again")


def _touch(application: Optional[Application]) -> None:
    if application is not None:
        application.updated_at = datetime.utcnow()


# ============================================================================
# STEP 1: PERSONAL INFO
# ============================================================================
async def save_personal_info(
    session: AsyncSession,
    user_id: uuid.UUID,
    data: PersonalInfoIn,
) -> PersonalInfo:

    snapshot = await load_registration_data(session, user_id)
    ensure_writable(snapshot, PERSONAL_INFO_STEP)

    post = (await session.execute(select(Post).where(Post.id == data.post_id))).scalar_one_or_none()
    if not post or not post.is_active:
        raise NotFoundError("Selected post is not available")

    # ---- application is created on the first save ----
    application = snapshot.application
    if application is None:
        application = Application(
            user_id=user_id,
            post_id=post.id,
            status=ApplicationStatus.Draft,
        )
        session.add(application)
        await session.flush()
        logger.info(f"Created application {application.id} for user {user_id}")
    else:
        application.post_id = post.id
        _touch(application)

    values = data.model_dump()
    values["gender"] = data.gender.value
    values["category"] = data.category.value

    personal_info = snapshot.personal_info
    if personal_info is None:
        personal_info = PersonalInfo(user_id=user_id, application_id=application.id, **values)
    else:
        for field, value in values.items():
            setattr(personal_info, field, value)
        personal_info.application_id = application.id
        personal_info.updated_at = datetime.utcnow()

    session.add(application)
    session.add(personal_info)
    await _commit(session, "personal info")
    await session.refresh(personal_info)
    return personal_info


async def get_personal_info(session: AsyncSession, user_id: uuid.UUID) -> Optional[PersonalInfo]:
    result = await session.execute(select(PersonalInfo).where(PersonalInfo.user_id == user_id))
    return result.scalar_one_or_none()


# ============================================================================
# STEP 2: OTHER DETAILS (upsert)
# ============================================================================
async def save_other_details(
    session: AsyncSession,
    user_id: uuid.UUID,
    data: OtherDetailsIn,
) -> OtherDetails:

    snapshot = await load_registration_data(session, user_id)
    ensure_writable(snapshot, OTHER_DETAILS_STEP)

    details = snapshot.other_details
    if details is None:
        details = OtherDetails(user_id=user_id, **data.model_dump())
    else:
        for field, value in data.model_dump().items():
            setattr(details, field, value)
        details.updated_at = datetime.utcnow()

    details.application_id = snapshot.application.id if snapshot.application else None
    _touch(snapshot.application)

    session.add(details)
    await _commit(session, "other details")
    await session.refresh(details)
    return details


async def get_other_details(session: AsyncSession, user_id: uuid.UUID) -> Optional[OtherDetails]:
    result = await session.execute(select(OtherDetails).where(OtherDetails.user_id == user_id))
    return result.scalar_one_or_none()


# ============================================================================
# SHARED ROW HELPERS (education / experience / documents)
# ============================================================================
async def _get_owned(session: AsyncSession, model, row_id: uuid.UUID, user_id: uuid.UUID, label: str):
    result = await session.execute(
        select(model).where(model.id == row_id, model.user_id == user_id)
    )
    row = result.scalar_one_or_none()
    if not row:
        raise NotFoundError(f"{label} not found")
    return row


async def _list_owned(session: AsyncSession, model, user_id: uuid.UUID):
    result = await session.execute(
        select(model).where(model.user_id == user_id).order_by(model.created_at)
    )
    return result.scalars().all()


def _ensure_unlocked(snapshot: RegistrationSnapshot) -> None:
    if snapshot.is_submitted:
        raise ApplicationLocked("Submitted applications can no longer be edited")


# ============================================================================
# STEP 3: EDUCATION
# ============================================================================
async def list_education(session: AsyncSession, user_id: uuid.UUID) -> list[EducationalQualification]:
    return await _list_owned(session, EducationalQualification, user_id)


async def add_education(session: AsyncSession, user_id: uuid.UUID, data: EducationIn) -> EducationalQualification:
    snapshot = await load_registration_data(session, user_id)
    ensure_writable(snapshot, EDUCATION_STEP)

    row = EducationalQualification(
        user_id=user_id,
        application_id=snapshot.application.id if snapshot.application else None,
        **data.model_dump(),
    )
    session.add(row)
    if snapshot.application is not None:
        advance_status(snapshot.application, ApplicationStatus.DocumentPending)
        session.add(snapshot.application)

    await _commit(session, "education")
    await session.refresh(row)
    return row


async def update_education(
    session: AsyncSession,
    user_id: uuid.UUID,
    education_id: uuid.UUID,
    data: EducationIn,
) -> EducationalQualification:
    snapshot = await load_registration_data(session, user_id)
    ensure_writable(snapshot, EDUCATION_STEP)

    row = await _get_owned(session, EducationalQualification, education_id, user_id, "Qualification")
    for field, value in data.model_dump().items():
        setattr(row, field, value)
    _touch(snapshot.application)

    session.add(row)
    await _commit(session, "education")
    await session.refresh(row)
    return row


async def delete_education(session: AsyncSession, user_id: uuid.UUID, education_id: uuid.UUID) -> None:
    snapshot = await load_registration_data(session, user_id)
    _ensure_unlocked(snapshot)

    row = await _get_owned(session, EducationalQualification, education_id, user_id, "Qualification")
    await session.delete(row)
    await _commit(session, "education")


# ============================================================================
# STEP 4: EXPERIENCE
# ============================================================================
async def list_experience(session: AsyncSession, user_id: uuid.UUID) -> list[ExperienceInfo]:
    return await _list_owned(session, ExperienceInfo, user_id)


async def add_experience(session: AsyncSession, user_id: uuid.UUID, data: ExperienceIn) -> ExperienceInfo:
    snapshot = await load_registration_data(session, user_id)
    ensure_writable(snapshot, EXPERIENCE_STEP)

    row = ExperienceInfo(
        user_id=user_id,
        application_id=snapshot.application.id if snapshot.application else None,
        **data.model_dump(),
    )
    session.add(row)
    if snapshot.application is not None:
        advance_status(snapshot.application, ApplicationStatus.DocumentPending)
        session.add(snapshot.application)

    await _commit(session, "experience")
    await session.refresh(row)
    return row


async def update_experience(
    session: AsyncSession,
    user_id: uuid.UUID,
    experience_id: uuid.UUID,
    data: ExperienceIn,
) -> ExperienceInfo:
    snapshot = await load_registration_data(session, user_id)
    ensure_writable(snapshot, EXPERIENCE_STEP)

    row = await _get_owned(session, ExperienceInfo, experience_id, user_id, "Experience")
    for field, value in data.model_dump().items():
        setattr(row, field, value)
    _touch(snapshot.application)

    session.add(row)
    await _commit(session, "experience")
    await session.refresh(row)
    return row


async def delete_experience(session: AsyncSession, user_id: uuid.UUID, experience_id: uuid.UUID) -> None:
    snapshot = await load_registration_data(session, user_id)
    _ensure_unlocked(snapshot)

    row = await _get_owned(session, ExperienceInfo, experience_id, user_id, "Experience")
    await session.delete(row)
    await _commit(session, "experience")


# ============================================================================
# STEP 5: DOCUMENTS
# ============================================================================
async def list_documents(session: AsyncSession, user_id: uuid.UUID) -> list[Document]:
    return await _list_owned(session, Document, user_id)


async def upload_candidate_document(
    session: AsyncSession,
    user_id: uuid.UUID,
    document_type: str,
    file: UploadFile,
) -> Document:
    snapshot = await load_registration_data(session, user_id)
    ensure_writable(snapshot, DOCUMENTS_STEP)

    content, extension = await read_document_upload(file)
    file_name, storage_path = build_document_path(user_id, document_type, extension)

    file_url = upload_document(storage_path, content, file.content_type)

    row = Document(
        user_id=user_id,
        application_id=snapshot.application.id if snapshot.application else None,
        document_type=document_type,
        file_url=file_url,
        file_path=storage_path,
        file_name=file_name,
        file_size=len(content),
        mime_type=file.content_type,
        status=DocumentStatus.Uploaded.value,
    )
    session.add(row)
    if snapshot.application is not None:
        advance_status(snapshot.application, ApplicationStatus.PaymentPending)
        session.add(snapshot.application)

    try:
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Failed to save document metadata for {storage_path}: {e}")
        remove_document(storage_path)
        raise PersistenceError("Please try again")

    await session.refresh(row)
    logger.info(f"Uploaded {document_type} for user {user_id} -> {storage_path}")
    return row


async def delete_candidate_document(session: AsyncSession, user_id: uuid.UUID, document_id: uuid.UUID) -> None:
    snapshot = await load_registration_data(session, user_id)
    _ensure_unlocked(snapshot)

    row = await _get_owned(session, Document, document_id, user_id, "Document")
    storage_path = row.file_path

    await session.delete(row)
    await _commit(session, "document")
    remove_document(storage_path)

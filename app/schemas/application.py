# app/schemas/application.py

from pydantic import BaseModel
from typing import Any, Optional
from uuid import UUID
from datetime import datetime

from app.models.enums import ApplicationStatus
from app.schemas.post import PostRead
from app.schemas.payment import PaymentRead
from app.schemas.registration import (
    PersonalInfoRead,
    OtherDetailsRead,
    EducationRead,
    ExperienceRead,
    DocumentRead,
)
from app.schemas.user import ProfileRead


# ============================================================
# APPLICATION READ (Candidate / Admin)
# ============================================================
class ApplicationRead(BaseModel):
    id: UUID
    user_id: UUID
    post_id: Optional[UUID]
    status: ApplicationStatus
    application_number: Optional[str]
    submitted_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ApplicationWithPost(ApplicationRead):
    post: Optional[PostRead] = None


# ============================================================
# CANDIDATE DASHBOARD
# ============================================================
class CandidateDashboard(BaseModel):
    profile: Optional[ProfileRead]
    personal_info: Optional[PersonalInfoRead]
    applications: list[ApplicationWithPost]
    documents: list[DocumentRead]
    payments: list[PaymentRead]
    mobile_verified: bool
    has_submitted_application: bool
    completion_percentage: float


# ============================================================
# ADMIN DASHBOARD
# ============================================================
class AdminStats(BaseModel):
    total_applications: int
    by_status: dict[str, int]
    total_candidates: int
    total_fee_collected: float


class AdminApplicationItem(ApplicationRead):
    candidate_name: Optional[str] = None
    candidate_email: Optional[str] = None
    post_name: Optional[str] = None


class AdminApplicationList(BaseModel):
    total: int
    page: int
    page_size: int
    items: list[AdminApplicationItem]


class AuditEntry(BaseModel):
    action: str
    actor_role: Optional[str]
    actor_name: Optional[str]
    remarks: Optional[str]
    details: dict[str, Any]
    timestamp: datetime

    class Config:
        from_attributes = True


class AdminApplicationDetail(BaseModel):
    application: ApplicationWithPost
    candidate: Optional[ProfileRead]
    personal_info: Optional[PersonalInfoRead]
    other_details: Optional[OtherDetailsRead]
    education: list[EducationRead]
    experience: list[ExperienceRead]
    documents: list[DocumentRead]
    payments: list[PaymentRead]
    completed_steps: list[int]
    audit_trail: list[AuditEntry]

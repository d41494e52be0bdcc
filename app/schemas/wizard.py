from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID
from datetime import datetime

from app.schemas.registration import OtherDetailsIn


class StepRead(BaseModel):
    id: int
    title: str
    description: str
    completed: bool
    current: bool
    locked: bool


class WizardStateRead(BaseModel):
    application_id: Optional[UUID] = None
    application_status: Optional[str] = None
    current_step: int
    completed_steps: list[int]
    payment_completed: bool
    max_allowed_step: int
    steps: list[StepRead]


class GoToStepRequest(BaseModel):
    step: int = Field(ge=1, le=7)


class NavigationRequest(BaseModel):
    # step the client is currently showing
    current_step: int = Field(ge=1, le=7)


class NextRequest(NavigationRequest):
    # only read when advancing from step 2
    other_details: Optional[OtherDetailsIn] = None


class SubmitResponse(BaseModel):
    application_id: UUID
    application_number: str
    status: str
    submitted_at: datetime
    message: str = "Application submitted successfully!"

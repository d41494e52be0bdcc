# app/schemas/registration.py

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional
from uuid import UUID
from datetime import date, datetime
from decimal import Decimal

from app.models.enums import Category, DocumentType, Gender


def _digits(value: str, length: int, message: str) -> str:
    value = value.strip()
    if len(value) != length or not value.isdigit():
        raise ValueError(message)
    return value


# ============================================================
# STEP 1: PERSONAL INFO
# ============================================================
class PersonalInfoIn(BaseModel):
    post_id: UUID
    first_name: str = Field(min_length=1)
    middle_name: Optional[str] = None
    last_name: str = Field(min_length=1)
    father_name: str = Field(min_length=1)
    mother_name: str = Field(min_length=1)
    date_of_birth: date
    gender: Gender
    category: Category
    aadhar_number: str
    address: str = Field(min_length=1)
    state: str = "Jharkhand"
    district: str = Field(min_length=1)
    pincode: str
    alternative_mobile: Optional[str] = None

    @field_validator("aadhar_number")
    def aadhar_digits(cls, v: str):
        return _digits(v, 12, "Aadhar number must be 12 digits")

    @field_validator("pincode")
    def pincode_digits(cls, v: str):
        return _digits(v, 6, "Pincode must be 6 digits")

    @field_validator("alternative_mobile")
    def mobile_digits(cls, v: Optional[str]):
        if v is None or v == "":
            return None
        return _digits(v, 10, "Mobile number must be 10 digits")


class PersonalInfoRead(BaseModel):
    id: UUID
    user_id: UUID
    application_id: Optional[UUID]
    post_id: Optional[UUID]
    first_name: str
    middle_name: Optional[str]
    last_name: str
    father_name: str
    mother_name: str
    date_of_birth: date
    gender: str
    category: str
    aadhar_number: str
    address: str
    state: str
    district: str
    pincode: str
    alternative_mobile: Optional[str]
    updated_at: datetime

    class Config:
        from_attributes = True


# ============================================================
# STEP 2: OTHER DETAILS
# ============================================================
class OtherDetailsIn(BaseModel):
    category: Optional[str] = None
    nationality: str
    religion: Optional[str] = None
    disability_status: Optional[str] = None

    @field_validator("nationality")
    def nationality_required(cls, v: str):
        if not v or not v.strip():
            raise ValueError("Please enter nationality")
        return v.strip()


class OtherDetailsRead(OtherDetailsIn):
    id: UUID
    user_id: UUID
    application_id: Optional[UUID]
    updated_at: datetime

    class Config:
        from_attributes = True


# ============================================================
# STEP 3: EDUCATION
# ============================================================
class EducationIn(BaseModel):
    qualification_type: str = Field(min_length=1)
    board_university: str = Field(min_length=1)
    passing_year: int
    percentage: Optional[float] = Field(default=None, ge=0, le=100)
    grade: Optional[str] = None
    subjects: Optional[str] = None
    roll_number: Optional[str] = None

    @field_validator("passing_year")
    def valid_year(cls, v: int):
        if v < 1950 or v > date.today().year:
            raise ValueError("Invalid year")
        return v


class EducationRead(EducationIn):
    id: UUID
    user_id: UUID
    application_id: Optional[UUID]
    created_at: datetime

    class Config:
        from_attributes = True


# ============================================================
# STEP 4: EXPERIENCE
# ============================================================
class ExperienceIn(BaseModel):
    company_name: str = Field(min_length=1)
    designation: str = Field(min_length=1)
    from_date: date
    to_date: Optional[date] = None
    is_current: bool = False
    salary: Optional[Decimal] = None
    job_description: Optional[str] = None

    @model_validator(mode="after")
    def current_job_has_no_end(self):
        if self.is_current:
            self.to_date = None
        elif self.to_date and self.to_date < self.from_date:
            raise ValueError("To date cannot be before from date")
        return self


class ExperienceRead(ExperienceIn):
    id: UUID
    user_id: UUID
    application_id: Optional[UUID]
    created_at: datetime

    class Config:
        from_attributes = True


# ============================================================
# STEP 5: DOCUMENTS
# ============================================================
class DocumentRead(BaseModel):
    id: UUID
    user_id: UUID
    application_id: Optional[UUID]
    document_type: DocumentType | str
    file_url: str
    file_path: str
    file_name: str
    file_size: int
    mime_type: str
    status: str
    created_at: datetime

    class Config:
        from_attributes = True

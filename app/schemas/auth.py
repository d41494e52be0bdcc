from pydantic import BaseModel, EmailStr, field_validator, ValidationInfo
from typing import Optional

from app.schemas.user import UserRead, ProfileRead


# -------------------------------------------------------------------
# LOGIN REQUEST (candidates and admins)
# -------------------------------------------------------------------
class LoginRequest(BaseModel):
    email: EmailStr
    password: str


# -------------------------------------------------------------------
# CANDIDATE SIGN-UP (Public)
# -------------------------------------------------------------------
class SignupRequest(BaseModel):
    full_name: str
    email: EmailStr
    password: str
    confirm_password: str

    @field_validator("full_name")
    def name_not_blank(cls, v: str):
        if not v.strip():
            raise ValueError("Full name is required")
        return v.strip()

    @field_validator("password")
    def password_length(cls, v: str):
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v

    @field_validator("confirm_password")
    def passwords_match(cls, v, info: ValidationInfo):
        password = info.data.get("password")
        if password and v != password:
            raise ValueError("Passwords do not match")
        return v

    class Config:
        json_schema_extra = {
            "examples": [
                {
                    "full_name": "Asha Kumari",
                    "email": "asha@example.com",
                    "password": "secret123",
                    "confirm_password": "secret123"
                }
            ]
        }


# -------------------------------------------------------------------
# TOKEN + USER DETAILS (Used for login response)
# -------------------------------------------------------------------
class TokenWithUser(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    user: UserRead
    profile: Optional[ProfileRead] = None

from typing import Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr
from app.models.user import UserRole


# ---------------------------------------------------------
# READ USER (response)
# ---------------------------------------------------------
class UserRead(BaseModel):
    id: UUID
    name: str
    email: EmailStr
    role: UserRole | str

    class Config:
        from_attributes = True


class ProfileRead(BaseModel):
    user_id: UUID
    full_name: str
    mobile_number: Optional[str] = None
    phone_verified: bool

    class Config:
        from_attributes = True

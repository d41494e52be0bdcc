from pydantic import BaseModel
from uuid import UUID


class PostRead(BaseModel):
    id: UUID
    post_name: str
    post_code: str
    is_active: bool

    class Config:
        from_attributes = True

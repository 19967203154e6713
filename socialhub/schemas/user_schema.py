from pydantic import BaseModel, EmailStr, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime

class CamelModel(BaseModel):
    """Base for wire models: snake_case in Python, camelCase in JSON"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

class UserBase(CamelModel):
    email: EmailStr
    name: str

class UserUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    profile_image: Optional[str] = Field(None, max_length=500)

class UserResponse(UserBase):
    id: str
    profile_image: Optional[str] = None
    created_at: datetime

class UserEnvelope(CamelModel):
    user: UserResponse

class SuccessResponse(CamelModel):
    success: bool = True

from pydantic import EmailStr, Field
from typing import Optional
from socialhub.schemas.user_schema import CamelModel, UserResponse

class LoginRequest(CamelModel):
    """Schema for login request"""
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=1, description="Password")

class RegisterRequest(CamelModel):
    """Schema for registration request"""
    name: str = Field(..., min_length=2, max_length=100, description="Display name")
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(
        ...,
        min_length=6,
        max_length=100,
        description="Password (min 6 characters)"
    )

class ChangePasswordRequest(CamelModel):
    """Schema for changing password"""
    current_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(
        ...,
        min_length=6,
        max_length=100,
        description="New password"
    )

class AuthResponse(CamelModel):
    """User record plus a freshly issued bearer token"""
    user: UserResponse
    token: str

class TokenData(CamelModel):
    """Claims embedded in an access token"""
    user_id: str
    email: str
    name: str
    version: int = 0
    exp: Optional[int] = None

class PasswordChangedResponse(CamelModel):
    """Tokens issued before the change stop working; this one replaces them"""
    success: bool = True
    token: Optional[str] = None

"""
Social API Backend — Authentication Schemas
"""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from social_api.schemas.common import DisplayName, Password


class RegisterRequest(BaseModel):
    name: DisplayName = Field(description="Unique display name")
    email: EmailStr = Field(description="Unique email address")
    password: Password = Field(min_length=6)


class LoginRequest(BaseModel):
    email: EmailStr
    password: Password = Field(min_length=1)


class UserResponse(BaseModel):
    """Public view of a User; password_hash is never exposed."""
    id: int
    name: str
    email: str
    created_at: datetime

    model_config = {"from_attributes": True}


class RegisterResponse(BaseModel):
    user: UserResponse


class LoginResponse(BaseModel):
    token: str = Field(description="Bearer token: send as 'Authorization: Bearer <token>'")
    user: UserResponse

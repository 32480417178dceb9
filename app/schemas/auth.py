from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional

from ..core.security import UserRole


class UserCreate(BaseModel):
    login: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)
    role: UserRole


class UserLogin(BaseModel):
    login: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    login: str
    role: UserRole
    is_active: bool = True
    created_at: Optional[datetime] = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int
    role: UserRole


class DoctorResponse(BaseModel):
    id: int
    name: str

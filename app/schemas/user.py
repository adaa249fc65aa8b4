"""
User Schemas
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator
from uuid import UUID

from app.models.user import UserRole


class UserBase(BaseModel):
    username: str = Field(..., min_length=3, max_length=255)
    email: EmailStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class UserRegister(UserBase):
    """Self sign-up; admin accounts are only granted by another admin"""
    password: str = Field(..., min_length=8)
    role: UserRole = UserRole.STUDENT

    @field_validator('role')
    @classmethod
    def no_self_service_admin(cls, v: UserRole) -> UserRole:
        if v == UserRole.ADMIN:
            raise ValueError("admin accounts cannot be self-registered")
        return v


class ProfileUpdate(BaseModel):
    """Schema for updating user profile (self-update)"""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    profile_image_url: Optional[str] = None


class RoleUpdate(BaseModel):
    role: UserRole


class UserResponse(BaseModel):
    id: UUID
    username: str
    email: str
    role: UserRole
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

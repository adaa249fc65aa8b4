"""
Doctor and Review Schemas
"""
from datetime import datetime
from typing import Any, List, Optional
from pydantic import BaseModel, Field, field_validator
from uuid import UUID

from app.schemas.rating import RatingSummary


def empty_to_none(v: Any) -> Any:
    """Convert empty string to None"""
    if v == '' or v == 'null':
        return None
    return v


class DoctorBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    department: str = Field(..., min_length=2, max_length=255)
    title: Optional[str] = None
    bio: Optional[str] = None
    profile_image_url: Optional[str] = None

    @field_validator('title', 'bio', 'profile_image_url', mode='before')
    @classmethod
    def convert_empty_to_none(cls, v):
        return empty_to_none(v)


class DoctorCreate(DoctorBase):
    pass


class DoctorUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    department: Optional[str] = Field(None, min_length=2, max_length=255)
    title: Optional[str] = None
    bio: Optional[str] = None
    profile_image_url: Optional[str] = None

    @field_validator('title', 'bio', 'profile_image_url', mode='before')
    @classmethod
    def convert_empty_to_none(cls, v):
        return empty_to_none(v)


class DoctorResponse(DoctorBase):
    id: int
    teacher_user_id: Optional[UUID] = None
    created_at: datetime

    class Config:
        from_attributes = True


class DoctorWithRatings(DoctorResponse):
    ratings: Optional[RatingSummary] = None


class TeacherLinkRequest(BaseModel):
    teacher_user_id: Optional[UUID] = None


SCORE_FIELDS = ('teaching_quality', 'availability', 'communication', 'knowledge', 'fairness')


class ReviewCreate(BaseModel):
    teaching_quality: float = Field(..., ge=0, le=5)
    availability: float = Field(..., ge=0, le=5)
    communication: float = Field(..., ge=0, le=5)
    knowledge: float = Field(..., ge=0, le=5)
    fairness: float = Field(..., ge=0, le=5)
    comment: Optional[str] = Field(None, max_length=2000)

    @field_validator(*SCORE_FIELDS)
    @classmethod
    def half_point_steps(cls, v: float) -> float:
        if (v * 2) != int(v * 2):
            raise ValueError("scores move in steps of 0.5")
        return v

    @field_validator('comment', mode='before')
    @classmethod
    def blank_comment_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ReviewResponse(BaseModel):
    """Reviewer identity is intentionally absent"""
    id: int
    doctor_id: int
    teaching_quality: float
    availability: float
    communication: float
    knowledge: float
    fairness: float
    comment: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class DepartmentList(BaseModel):
    departments: List[str]

"""
Statistics Schemas
"""
from typing import List, Optional
from pydantic import BaseModel

from app.schemas.doctor import DoctorWithRatings, ReviewResponse


class StatsResponse(BaseModel):
    total_doctors: int
    total_reviews: int


class ChartRow(BaseModel):
    """One bar group in the dashboard chart"""
    name: str
    teaching: float
    availability: float
    communication: float
    knowledge: float
    fairness: float


class TeacherDashboardResponse(BaseModel):
    doctor: Optional[DoctorWithRatings] = None
    doctors: List[DoctorWithRatings]
    chart: List[ChartRow]
    recent_reviews: List[ReviewResponse]
    empty: bool

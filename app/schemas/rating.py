"""
Rating Schemas
"""
from typing import Dict, List, Optional
from pydantic import BaseModel


class RatingSummary(BaseModel):
    """Per-doctor aggregate, recomputed on every read"""
    doctor_id: int
    avg_teaching_quality: float = 0.0
    avg_availability: float = 0.0
    avg_communication: float = 0.0
    avg_knowledge: float = 0.0
    avg_fairness: float = 0.0
    overall_rating: float = 0.0
    total_reviews: int = 0


class FactorComparison(BaseModel):
    key: str
    scores: Dict[int, float]
    winner_id: Optional[int] = None
    delta: float = 0.0
    labels: Dict[int, str]


class ComparisonResponse(BaseModel):
    doctor_ids: List[int]
    names: Dict[int, str]
    factors: List[FactorComparison]

"""
Rating aggregation

A RatingSummary is a pure function of a doctor's reviews:
every factor average is the plain arithmetic mean, overall_rating is the
mean of the five factor averages, and a doctor with no reviews gets zeros.
"""
import logging
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.review import Review
from app.schemas.doctor import DoctorWithRatings
from app.schemas.rating import RatingSummary

logger = logging.getLogger(__name__)

FACTORS = ("teaching_quality", "availability", "communication", "knowledge", "fairness")


def _finish(doctor_id: int, totals: Dict[str, float], count: int) -> RatingSummary:
    if count == 0:
        return RatingSummary(doctor_id=doctor_id)

    averages = {factor: totals[factor] / count for factor in FACTORS}
    overall = sum(averages.values()) / len(FACTORS)
    return RatingSummary(
        doctor_id=doctor_id,
        avg_teaching_quality=averages["teaching_quality"],
        avg_availability=averages["availability"],
        avg_communication=averages["communication"],
        avg_knowledge=averages["knowledge"],
        avg_fairness=averages["fairness"],
        overall_rating=overall,
        total_reviews=count,
    )


def summarize_reviews(doctor_id: int, reviews: Iterable) -> RatingSummary:
    """
    Reduce review rows to a RatingSummary.

    Args:
        doctor_id: Doctor the rows belong to
        reviews: Any objects exposing the five factor attributes

    Returns:
        RatingSummary (all zeros when there are no rows)
    """
    totals = dict.fromkeys(FACTORS, 0.0)
    count = 0
    for review in reviews:
        count += 1
        for factor in FACTORS:
            totals[factor] += float(getattr(review, factor))
    return _finish(doctor_id, totals, count)


def get_summary(db: Session, doctor_id: int) -> RatingSummary:
    reviews = db.query(Review).filter(Review.doctor_id == doctor_id).all()
    return summarize_reviews(doctor_id, reviews)


def get_summaries(db: Session, doctor_ids: Optional[Sequence[int]] = None) -> Dict[int, RatingSummary]:
    """
    Summaries for many doctors with one grouped query.

    Sums and counts come from the database; the averages are finished here
    so bulk and single reads agree exactly.
    """
    query = db.query(
        Review.doctor_id,
        func.count(Review.id),
        *[func.sum(getattr(Review, factor)) for factor in FACTORS]
    )
    if doctor_ids is not None:
        if not doctor_ids:
            return {}
        query = query.filter(Review.doctor_id.in_(list(doctor_ids)))

    summaries = {}
    for doctor_id, count, *sums in query.group_by(Review.doctor_id).all():
        totals = {factor: float(total or 0.0) for factor, total in zip(FACTORS, sums)}
        summaries[doctor_id] = _finish(doctor_id, totals, count or 0)

    if doctor_ids is not None:
        for doctor_id in doctor_ids:
            summaries.setdefault(doctor_id, RatingSummary(doctor_id=doctor_id))

    logger.debug(f"Computed {len(summaries)} rating summaries")
    return summaries


def summary_or_empty(summaries: Dict[int, RatingSummary], doctor_id: int) -> RatingSummary:
    return summaries.get(doctor_id) or RatingSummary(doctor_id=doctor_id)


def attach_ratings(db: Session, doctors: Sequence) -> List[DoctorWithRatings]:
    """Doctor rows -> DoctorWithRatings, one grouped query for all of them"""
    summaries = get_summaries(db, [d.id for d in doctors])
    return [
        DoctorWithRatings.model_validate(d).model_copy(update={"ratings": summary_or_empty(summaries, d.id)})
        for d in doctors
    ]

"""
Statistics Endpoints
"""
import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.user import User, UserRole
from app.models.doctor import Doctor
from app.models.review import Review
from app.schemas.doctor import ReviewResponse
from app.schemas.statistics import StatsResponse, TeacherDashboardResponse, ChartRow
from app.services.ratings import attach_ratings
from app.services.profiles import get_doctor_for_teacher
from app.core.security import require_teacher_or_admin

logger = logging.getLogger(__name__)
router = APIRouter()

RECENT_REVIEWS_LIMIT = 10


@router.get("", response_model=StatsResponse)
async def get_statistics(db: Session = Depends(get_db)):
    """Site-wide counts for the home page"""
    total_doctors = db.query(func.count(Doctor.id)).scalar() or 0
    total_reviews = db.query(func.count(Review.id)).scalar() or 0
    return StatsResponse(total_doctors=total_doctors, total_reviews=total_reviews)


@router.get("/teacher-dashboard", response_model=TeacherDashboardResponse)
async def get_teacher_dashboard(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher_or_admin)
):
    """
    Rating dashboard.

    Teachers see the doctor profile linked to their account; admins see
    every doctor that has at least one review.
    """
    try:
        is_admin = current_user.role == UserRole.ADMIN.value

        if is_admin:
            doctor_rows = db.query(Doctor).order_by(Doctor.name).all()
        else:
            own = get_doctor_for_teacher(db, current_user)
            doctor_rows = [own] if own else []
            if not own:
                logger.info(f"Teacher {current_user.username} has no linked doctor profile")

        doctors = [d for d in attach_ratings(db, doctor_rows) if d.ratings.total_reviews > 0]

        chart = [
            ChartRow(
                name=d.name,
                teaching=d.ratings.avg_teaching_quality,
                availability=d.ratings.avg_availability,
                communication=d.ratings.avg_communication,
                knowledge=d.ratings.avg_knowledge,
                fairness=d.ratings.avg_fairness,
            )
            for d in doctors
        ]

        recent_reviews = []
        doctor_ids = [d.id for d in doctors]
        if doctor_ids:
            recent_reviews = db.query(Review).filter(
                Review.doctor_id.in_(doctor_ids)
            ).order_by(
                Review.created_at.desc(), Review.id.desc()
            ).limit(RECENT_REVIEWS_LIMIT).all()

        own_doctor = None
        if not is_admin and doctor_rows:
            own_doctor = attach_ratings(db, doctor_rows)[0]

        return TeacherDashboardResponse(
            doctor=own_doctor,
            doctors=doctors,
            chart=chart,
            recent_reviews=[ReviewResponse.model_validate(r) for r in recent_reviews],
            empty=not doctors,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting dashboard data: {str(e)}")
        db.rollback()
        raise HTTPException(status_code=500, detail="Could not load dashboard data")

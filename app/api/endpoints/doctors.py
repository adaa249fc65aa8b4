"""
Doctor Endpoints - listing, comparison, reviews and admin CRUD
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.doctor import Doctor
from app.models.review import Review
from app.models.user import User
from app.schemas.doctor import (
    DoctorCreate, DoctorUpdate, DoctorWithRatings, DepartmentList,
    ReviewCreate, ReviewResponse
)
from app.schemas.rating import RatingSummary, ComparisonResponse
from app.services.ratings import attach_ratings, get_summary, get_summaries, summary_or_empty
from app.services.ranking import SortBy, filter_doctors, sort_doctors, list_departments
from app.services.comparison import CompareSet, compare_summaries
from app.core.security import require_admin, require_student

logger = logging.getLogger(__name__)
router = APIRouter()


def get_doctor_or_404(db: Session, doctor_id: int) -> Doctor:
    doctor = db.query(Doctor).filter(Doctor.id == doctor_id).first()
    if not doctor:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Doctor not found"
        )
    return doctor


def parse_id_list(raw: List[str]) -> List[int]:
    """Accept both ?ids=1&ids=2 and ?ids=1,2"""
    parsed = []
    for chunk in raw:
        for part in chunk.split(","):
            part = part.strip()
            if not part:
                continue
            try:
                parsed.append(int(part))
            except ValueError:
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail=f"Invalid doctor id: {part}"
                )
    return parsed


@router.get("", response_model=List[DoctorWithRatings])
async def get_doctors(
    search: Optional[str] = Query(None, description="Substring of name, department or title"),
    department: Optional[str] = Query(None, description="Exact department, or 'all'"),
    sort_by: SortBy = Query(SortBy.RATING),
    db: Session = Depends(get_db)
):
    """List doctors with their rating summaries"""
    doctors = attach_ratings(db, db.query(Doctor).order_by(Doctor.id).all())
    return sort_doctors(filter_doctors(doctors, search, department), sort_by)


@router.get("/departments", response_model=DepartmentList)
async def get_departments(db: Session = Depends(get_db)):
    """Distinct departments, sorted"""
    doctors = attach_ratings(db, db.query(Doctor).all())
    return DepartmentList(departments=list_departments(doctors))


@router.get("/compare", response_model=ComparisonResponse)
async def compare_doctors(
    ids: List[str] = Query(..., description="Up to three doctor ids, repeated or comma-separated; extras are ignored"),
    db: Session = Depends(get_db)
):
    """Side-by-side factor comparison"""
    selection = CompareSet(initial=parse_id_list(ids))
    doctors = {d.id: d for d in db.query(Doctor).filter(Doctor.id.in_(selection.members)).all()}
    missing = [doctor_id for doctor_id in selection.members if doctor_id not in doctors]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Doctor not found: {', '.join(str(m) for m in missing)}"
        )

    summaries = get_summaries(db, list(selection.members))
    return ComparisonResponse(
        doctor_ids=list(selection.members),
        names={doctor_id: doctors[doctor_id].name for doctor_id in selection.members},
        factors=compare_summaries([summary_or_empty(summaries, d) for d in selection.members]),
    )


@router.get("/{doctor_id}", response_model=DoctorWithRatings)
async def get_doctor(doctor_id: int, db: Session = Depends(get_db)):
    """Get one doctor with ratings"""
    doctor = get_doctor_or_404(db, doctor_id)
    return attach_ratings(db, [doctor])[0]


@router.get("/{doctor_id}/ratings", response_model=RatingSummary)
async def get_doctor_ratings(doctor_id: int, db: Session = Depends(get_db)):
    """Rating summary, recomputed from the reviews"""
    get_doctor_or_404(db, doctor_id)
    return get_summary(db, doctor_id)


@router.get("/{doctor_id}/reviews", response_model=List[ReviewResponse])
async def get_doctor_reviews(
    doctor_id: int,
    skip: int = 0,
    limit: int = Query(50, le=200),
    db: Session = Depends(get_db)
):
    """Anonymous reviews, newest first"""
    get_doctor_or_404(db, doctor_id)
    return db.query(Review).filter(
        Review.doctor_id == doctor_id
    ).order_by(
        Review.created_at.desc(), Review.id.desc()
    ).offset(skip).limit(limit).all()


@router.post("/{doctor_id}/reviews", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    doctor_id: int,
    review_data: ReviewCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student)
):
    """Submit a review (students only)"""
    get_doctor_or_404(db, doctor_id)
    try:
        review = Review(
            doctor_id=doctor_id,
            reviewer_id=current_user.id,
            **review_data.model_dump()
        )
        db.add(review)
        db.commit()
        db.refresh(review)
    except Exception as e:
        logger.error(f"Error creating review for doctor {doctor_id}: {str(e)}")
        db.rollback()
        raise HTTPException(status_code=500, detail="Could not save review")

    logger.info(f"Review {review.id} submitted for doctor {doctor_id}")
    return review


@router.post("", response_model=DoctorWithRatings, status_code=status.HTTP_201_CREATED)
async def create_doctor(
    doctor_data: DoctorCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Create a doctor (admin only)"""
    try:
        doctor = Doctor(**doctor_data.model_dump())
        db.add(doctor)
        db.commit()
        db.refresh(doctor)
    except Exception as e:
        logger.error(f"Error creating doctor: {str(e)}")
        db.rollback()
        raise HTTPException(status_code=500, detail="Could not create doctor")

    logger.info(f"Doctor {doctor.id} created by {current_user.username}")
    return attach_ratings(db, [doctor])[0]


@router.patch("/{doctor_id}", response_model=DoctorWithRatings)
async def update_doctor(
    doctor_id: int,
    doctor_data: DoctorUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Edit a doctor (admin only)"""
    doctor = get_doctor_or_404(db, doctor_id)

    for field, value in doctor_data.model_dump(exclude_unset=True).items():
        if field in ("name", "department") and value is None:
            continue
        setattr(doctor, field, value)

    try:
        db.commit()
        db.refresh(doctor)
    except Exception as e:
        logger.error(f"Error updating doctor {doctor_id}: {str(e)}")
        db.rollback()
        raise HTTPException(status_code=500, detail="Could not update doctor")

    return attach_ratings(db, [doctor])[0]

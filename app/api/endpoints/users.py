"""
User Profile Endpoints
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.user import User
from app.schemas.user import ProfileUpdate, UserResponse
from app.services.profiles import get_doctor_for_teacher, sync_doctor_profile
from app.core.security import get_current_user

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_profile(current_user: User = Depends(get_current_user)):
    """Get own profile"""
    return current_user


@router.patch("/me", response_model=UserResponse)
async def update_profile(
    profile: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update own profile; a teacher's new picture also lands on their doctor profile"""
    if profile.email is not None and profile.email.lower() != current_user.email.lower():
        taken = db.query(User).filter(
            func.lower(User.email) == profile.email.lower(),
            User.id != current_user.id
        ).first()
        if taken:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered"
            )

    for field, value in profile.model_dump(exclude_unset=True).items():
        if field == "email" and value is None:
            continue
        setattr(current_user, field, value)

    try:
        doctor = get_doctor_for_teacher(db, current_user)
        if doctor is not None and sync_doctor_profile(doctor):
            logger.info(f"Synced profile image to doctor {doctor.id}")
        db.commit()
        db.refresh(current_user)
    except Exception as e:
        logger.error(f"Error updating profile: {str(e)}")
        db.rollback()
        raise HTTPException(status_code=500, detail="Could not update profile")

    return current_user

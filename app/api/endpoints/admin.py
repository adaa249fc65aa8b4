"""
Admin Endpoints - user roles and teacher/doctor links
"""
import uuid
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.user import User, UserRole
from app.schemas.user import RoleUpdate, UserResponse
from app.schemas.doctor import DoctorWithRatings, TeacherLinkRequest
from app.services.ratings import attach_ratings
from app.services.profiles import (
    ProfileLinkError, TeacherAlreadyLinked, link_teacher, sync_doctor_profile
)
from app.api.endpoints.doctors import get_doctor_or_404
from app.core.security import require_admin

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/users", response_model=List[UserResponse])
async def get_users(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Get all users (admin only)"""
    return db.query(User).order_by(User.created_at).offset(skip).limit(limit).all()


@router.patch("/users/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: uuid.UUID,
    role_data: RoleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Change a user's role (admin only, never your own)"""
    if user_id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot edit your own role"
        )

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    user.role = role_data.role.value
    # A doctor profile stays linked only to teacher accounts
    if user.doctor_profile is not None and user.role != UserRole.TEACHER.value:
        link_teacher(db, user.doctor_profile, None)

    try:
        db.commit()
        db.refresh(user)
    except Exception as e:
        logger.error(f"Error updating role for {user_id}: {str(e)}")
        db.rollback()
        raise HTTPException(status_code=500, detail="Could not update role")

    logger.info(f"{current_user.username} changed role of {user.username} to {user.role}")
    return user


@router.put("/doctors/{doctor_id}/teacher", response_model=DoctorWithRatings)
async def set_doctor_teacher(
    doctor_id: int,
    link: TeacherLinkRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Link a doctor profile to a teacher account, or unlink with null"""
    doctor = get_doctor_or_404(db, doctor_id)

    teacher = None
    if link.teacher_user_id is not None:
        teacher = db.query(User).filter(User.id == link.teacher_user_id).first()
        if not teacher:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )

    try:
        link_teacher(db, doctor, teacher)
    except TeacherAlreadyLinked as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ProfileLinkError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        db.commit()
        db.refresh(doctor)
    except IntegrityError as e:
        logger.error(f"Conflicting teacher link for doctor {doctor_id}: {str(e)}")
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Teacher is already linked to another doctor"
        )
    except Exception as e:
        logger.error(f"Error linking teacher to doctor {doctor_id}: {str(e)}")
        db.rollback()
        raise HTTPException(status_code=500, detail="Could not update teacher link")

    return attach_ratings(db, [doctor])[0]


@router.post("/doctors/{doctor_id}/sync-profile", response_model=DoctorWithRatings)
async def sync_profile(
    doctor_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Copy the linked teacher's profile image onto the doctor"""
    doctor = get_doctor_or_404(db, doctor_id)
    if doctor.teacher_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Doctor is not linked to a teacher account"
        )

    if sync_doctor_profile(doctor):
        db.commit()
        db.refresh(doctor)
    return attach_ratings(db, [doctor])[0]

"""
Teacher account <-> doctor profile link

A doctor profile belongs to at most one teacher account through
Doctor.teacher_user_id. The teacher's profile image is mirrored onto the
doctor record.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.doctor import Doctor
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)


class ProfileLinkError(Exception):
    pass


class TeacherAlreadyLinked(ProfileLinkError):
    pass


def get_doctor_for_teacher(db: Session, user: User) -> Optional[Doctor]:
    return db.query(Doctor).filter(Doctor.teacher_user_id == user.id).first()


def sync_doctor_profile(doctor: Doctor) -> bool:
    """Copy the linked teacher's image onto the doctor; True if anything changed"""
    teacher = doctor.teacher_user
    if teacher is None or not teacher.profile_image_url:
        return False
    if doctor.profile_image_url == teacher.profile_image_url:
        return False
    doctor.profile_image_url = teacher.profile_image_url
    return True


def link_teacher(db: Session, doctor: Doctor, teacher: Optional[User]) -> Doctor:
    """
    Point a doctor at a teacher account (or unlink with None).

    Raises:
        ProfileLinkError: the account is not a teacher
        TeacherAlreadyLinked: the teacher owns another doctor profile
    """
    if teacher is None:
        doctor.teacher_user_id = None
        doctor.teacher_user = None
        return doctor

    if teacher.role != UserRole.TEACHER.value:
        raise ProfileLinkError(f"User {teacher.username} is not a teacher")

    other = get_doctor_for_teacher(db, teacher)
    if other is not None and other.id != doctor.id:
        raise TeacherAlreadyLinked(f"User {teacher.username} is already linked to doctor {other.id}")

    doctor.teacher_user = teacher
    doctor.teacher_user_id = teacher.id
    sync_doctor_profile(doctor)
    logger.info(f"Linked doctor {doctor.id} to teacher {teacher.username}")
    return doctor


def sync_all_profiles(db: Session) -> List[Doctor]:
    updated = []
    for doctor in db.query(Doctor).filter(Doctor.teacher_user_id.isnot(None)).all():
        if sync_doctor_profile(doctor):
            updated.append(doctor)
    db.commit()
    logger.info(f"Synced {len(updated)} doctor profiles")
    return updated

"""
Unit tests for teacher/doctor profile links.
"""
import pytest

from app.models.user import UserRole
from app.services.profiles import (
    ProfileLinkError, TeacherAlreadyLinked, get_doctor_for_teacher, link_teacher, sync_all_profiles
)


def test_link_copies_profile_image(db_session, make_doctor, teacher):
    teacher.profile_image_url = "https://img.test/sarah.png"
    doctor = make_doctor()

    link_teacher(db_session, doctor, teacher)
    db_session.commit()

    assert doctor.teacher_user_id == teacher.id
    assert doctor.profile_image_url == "https://img.test/sarah.png"
    assert get_doctor_for_teacher(db_session, teacher).id == doctor.id


def test_only_teachers_can_be_linked(db_session, make_doctor, student):
    with pytest.raises(ProfileLinkError):
        link_teacher(db_session, make_doctor(), student)


def test_teacher_owns_at_most_one_doctor(db_session, make_doctor, teacher):
    first = make_doctor("Dr. A")
    second = make_doctor("Dr. B")
    link_teacher(db_session, first, teacher)
    db_session.commit()

    with pytest.raises(TeacherAlreadyLinked):
        link_teacher(db_session, second, teacher)


def test_relinking_same_doctor_is_allowed(db_session, make_doctor, teacher):
    doctor = make_doctor()
    link_teacher(db_session, doctor, teacher)
    db_session.commit()

    link_teacher(db_session, doctor, teacher)
    assert doctor.teacher_user_id == teacher.id


def test_unlink(db_session, make_doctor, teacher):
    doctor = make_doctor()
    link_teacher(db_session, doctor, teacher)
    db_session.commit()

    link_teacher(db_session, doctor, None)
    db_session.commit()

    assert doctor.teacher_user_id is None
    assert get_doctor_for_teacher(db_session, teacher) is None


def test_sync_all_profiles(db_session, make_doctor, make_user):
    teacher_a = make_user("teacher_a", UserRole.TEACHER)
    teacher_b = make_user("teacher_b", UserRole.TEACHER)
    doctor_a = make_doctor("Dr. A")
    doctor_b = make_doctor("Dr. B")
    make_doctor("Dr. Unlinked")
    link_teacher(db_session, doctor_a, teacher_a)
    link_teacher(db_session, doctor_b, teacher_b)
    db_session.commit()

    teacher_a.profile_image_url = "https://img.test/a.png"
    db_session.commit()

    updated = sync_all_profiles(db_session)

    assert [d.id for d in updated] == [doctor_a.id]
    assert doctor_a.profile_image_url == "https://img.test/a.png"
    assert doctor_b.profile_image_url is None

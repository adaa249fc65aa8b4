"""
Doctor listing: search, department filter and sorting
"""
import enum
import unicodedata
from typing import List, Optional, Sequence

from app.schemas.doctor import DoctorWithRatings

ALL_DEPARTMENTS = "all"


class SortBy(str, enum.Enum):
    RATING = "rating"
    REVIEWS = "reviews"
    NAME = "name"


def remove_accents(text: str) -> str:
    """Lowercase and strip combining marks so 'José' matches 'jose' and 'Đặng' matches 'dang'"""
    if not text:
        return ""
    text = unicodedata.normalize('NFD', text)
    text = ''.join(char for char in text if unicodedata.category(char) != 'Mn')
    text = text.casefold()
    # Replace đ/Đ with d
    return text.replace('đ', 'd').replace('Đ', 'd')


def doctor_matches_search(doctor: DoctorWithRatings, search: str) -> bool:
    """Case-insensitive substring match against name, department and title"""
    needle = search.strip().casefold()
    needle_no_accent = remove_accents(search.strip())

    for field in (doctor.name, doctor.department, doctor.title):
        if not field:
            continue
        if needle in field.casefold():
            return True
        if needle_no_accent in remove_accents(field):
            return True
    return False


def filter_doctors(
    doctors: Sequence[DoctorWithRatings],
    search: Optional[str] = None,
    department: Optional[str] = None
) -> List[DoctorWithRatings]:
    filtered = list(doctors)
    if search and search.strip():
        filtered = [d for d in filtered if doctor_matches_search(d, search)]
    if department and department != ALL_DEPARTMENTS:
        filtered = [d for d in filtered if d.department == department]
    return filtered


def _overall(doctor: DoctorWithRatings) -> float:
    return doctor.ratings.overall_rating if doctor.ratings else 0.0


def _review_count(doctor: DoctorWithRatings) -> int:
    return doctor.ratings.total_reviews if doctor.ratings else 0


def sort_doctors(doctors: Sequence[DoctorWithRatings], sort_by: SortBy = SortBy.RATING) -> List[DoctorWithRatings]:
    """
    Stable sort; equal keys keep their input order.

    rating and reviews sort descending, name ascending.
    Doctors without ratings count as zero.
    """
    sort_by = SortBy(sort_by)
    if sort_by == SortBy.RATING:
        return sorted(doctors, key=_overall, reverse=True)
    if sort_by == SortBy.REVIEWS:
        return sorted(doctors, key=_review_count, reverse=True)
    return sorted(doctors, key=lambda d: d.name.casefold())


def list_departments(doctors: Sequence[DoctorWithRatings]) -> List[str]:
    return sorted({d.department for d in doctors if d.department})

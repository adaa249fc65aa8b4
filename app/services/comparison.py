"""
Side-by-side doctor comparison
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from app.core.config import settings
from app.schemas.rating import FactorComparison, RatingSummary

# Factor keys as compared, mapped to RatingSummary fields
COMPARED_FIELDS = (
    ("teaching_quality", "avg_teaching_quality"),
    ("availability", "avg_availability"),
    ("communication", "avg_communication"),
    ("knowledge", "avg_knowledge"),
    ("fairness", "avg_fairness"),
    ("overall", "overall_rating"),
)

RATING_BANDS = (
    (4.5, "excellent"),
    (4.0, "good"),
    (3.5, "satisfactory"),
    (3.0, "fair"),
    (2.0, "poor"),
)


def rating_label(value: float) -> str:
    if not value:
        return "not_rated"
    for threshold, label in RATING_BANDS:
        if value >= threshold:
            return label
    return "very_poor"


class CompareSet:
    """
    Bounded selection of doctor ids.

    Adding past the limit is a no-op; nothing is evicted.
    """

    def __init__(self, limit: Optional[int] = None, initial: Iterable[int] = ()):
        self.limit = limit if limit is not None else settings.COMPARE_LIMIT
        self._members: List[int] = []
        for doctor_id in initial:
            self.add(doctor_id)

    @property
    def members(self) -> Tuple[int, ...]:
        return tuple(self._members)

    @property
    def is_full(self) -> bool:
        return len(self._members) >= self.limit

    def __len__(self) -> int:
        return len(self._members)

    def __contains__(self, doctor_id: int) -> bool:
        return doctor_id in self._members

    def add(self, doctor_id: int) -> bool:
        if doctor_id in self._members or self.is_full:
            return False
        self._members.append(doctor_id)
        return True

    def remove(self, doctor_id: int) -> bool:
        if doctor_id not in self._members:
            return False
        self._members.remove(doctor_id)
        return True

    def toggle(self, doctor_id: int) -> Tuple[int, ...]:
        if not self.remove(doctor_id):
            self.add(doctor_id)
        return self.members

    def clear(self) -> None:
        self._members.clear()


def _winner_and_delta(values: Dict[int, float]) -> Tuple[Optional[int], float]:
    ranked = sorted(values.items(), key=lambda item: item[1], reverse=True)
    if len(ranked) < 2:
        return None, 0.0
    (best_id, best), (_, runner_up) = ranked[0], ranked[1]
    if best == runner_up:
        return None, 0.0
    lead = Decimal(str(best - runner_up)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return best_id, float(lead)


def compare_summaries(summaries: Sequence[RatingSummary]) -> List[FactorComparison]:
    """
    Per-factor values, the strict winner (None on a tie at the top)
    and the winner's lead over the runner-up.
    """
    comparisons = []
    for key, field in COMPARED_FIELDS:
        values = {s.doctor_id: getattr(s, field) for s in summaries}
        winner_id, delta = _winner_and_delta(values)
        comparisons.append(FactorComparison(
            key=key,
            scores=values,
            winner_id=winner_id,
            delta=delta,
            labels={doctor_id: rating_label(value) for doctor_id, value in values.items()},
        ))
    return comparisons

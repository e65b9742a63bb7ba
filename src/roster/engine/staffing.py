"""
Staffing Evaluation
===================
Per-day coverage counts compared against configured minimums.

An assignment counts only if it is not full-shift TimeOff, not a special
assignment and not marked off. Overtime counts. Probationary officers are
tallied separately and never satisfy either minimum. A minimum of 0, or no
configured requirement, never flags understaffing.
"""
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, Mapping, Optional

from roster.models.assignment import DailyAssignment
from roster.models.calendar import day_of_week
from roster.models.officer import Officer, RankClass
from roster.models.records import StaffingRequirement
from roster.utils.logging_setup import get_logger

logger = get_logger("roster.engine.staffing")


@dataclass(frozen=True)
class StaffingVerdict:
    """Coverage for one date of one shift."""
    date: date
    day_of_week: int
    current_supervisors: int
    current_officers: int
    current_probationary: int
    minimum_supervisors: int
    minimum_officers: int
    has_requirement: bool
    understaffed_supervisors: bool
    understaffed_officers: bool

    @property
    def is_understaffed(self) -> bool:
        return self.understaffed_supervisors or self.understaffed_officers

    @property
    def supervisors_needed(self) -> int:
        return max(0, self.minimum_supervisors - self.current_supervisors)

    @property
    def officers_needed(self) -> int:
        return max(0, self.minimum_officers - self.current_officers)

    @property
    def shortfall_description(self) -> str:
        """Human-readable shortfall, e.g. "1 Supervisor(s), 2 Officer(s)"."""
        parts = []
        if self.supervisors_needed > 0:
            parts.append(f"{self.supervisors_needed} Supervisor(s)")
        if self.officers_needed > 0:
            parts.append(f"{self.officers_needed} Officer(s)")
        return ", ".join(parts)

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "day_of_week": self.day_of_week,
            "current_supervisors": self.current_supervisors,
            "current_officers": self.current_officers,
            "current_probationary": self.current_probationary,
            "minimum_supervisors": self.minimum_supervisors,
            "minimum_officers": self.minimum_officers,
            "has_requirement": self.has_requirement,
            "understaffed_supervisors": self.understaffed_supervisors,
            "understaffed_officers": self.understaffed_officers,
            "shortfall": self.shortfall_description,
        }


def is_understaffed(current: int, minimum: int) -> bool:
    """A zero minimum means no requirement."""
    if minimum <= 0:
        return False
    return current < minimum


def requirements_by_day(
    requirements: Iterable[StaffingRequirement],
    shift_id: Optional[str] = None,
) -> Dict[int, StaffingRequirement]:
    """Key requirements by day-of-week; the last entry for a day wins."""
    by_day: Dict[int, StaffingRequirement] = {}
    for req in requirements:
        if shift_id is not None and req.shift_id != shift_id:
            continue
        if req.day_of_week in by_day:
            logger.warning(f"Duplicate staffing requirement for shift {req.shift_id} day {req.day_of_week}")
        by_day[req.day_of_week] = req
    return by_day


def evaluate_day(
    d: date,
    assignments: Iterable[DailyAssignment],
    officers: Mapping[str, Officer],
    requirement: Optional[StaffingRequirement],
) -> StaffingVerdict:
    """
    Evaluate one date's coverage.

    Args:
        d: The date
        assignments: Classified assignments for the date (one per officer)
        officers: {officer_id: Officer}; unknown ids count as regular officers
        requirement: Minimums for the date's weekday, or None

    Returns:
        StaffingVerdict
    """
    supervisors = officers_count = probationary = 0
    seen = set()
    for assignment in assignments:
        if assignment.officer_id in seen:
            continue
        seen.add(assignment.officer_id)
        if not assignment.counts_toward_coverage:
            continue
        officer = officers.get(assignment.officer_id)
        rank_class = officer.rank_class if officer else RankClass.OFFICER
        if rank_class.is_supervisor:
            supervisors += 1
        elif rank_class is RankClass.PROBATIONARY:
            probationary += 1
        else:
            officers_count += 1

    min_sup = requirement.minimum_supervisors if requirement else 0
    min_off = requirement.minimum_officers if requirement else 0

    return StaffingVerdict(
        date=d,
        day_of_week=day_of_week(d),
        current_supervisors=supervisors,
        current_officers=officers_count,
        current_probationary=probationary,
        minimum_supervisors=min_sup,
        minimum_officers=min_off,
        has_requirement=requirement is not None,
        understaffed_supervisors=is_understaffed(supervisors, min_sup),
        understaffed_officers=is_understaffed(officers_count, min_off),
    )


def evaluate_staffing(
    per_date: Mapping[date, Iterable[DailyAssignment]],
    officers: Mapping[str, Officer],
    requirements: Mapping[int, StaffingRequirement],
) -> Dict[date, StaffingVerdict]:
    """Evaluate every date; dates without a configured requirement get minimums of 0."""
    verdicts = {}
    for d in sorted(per_date):
        verdict = evaluate_day(d, per_date[d], officers, requirements.get(day_of_week(d)))
        if verdict.is_understaffed:
            logger.info(f"{d}: understaffed ({verdict.shortfall_description})")
        verdicts[d] = verdict
    return verdicts

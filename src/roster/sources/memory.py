"""In-memory roster source over already-fetched records."""
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Union

from roster.models.officer import Officer
from roster.models.records import (
    RecurringAssignment,
    ScheduleException,
    SeniorityInput,
    StaffingRequirement,
)


class InMemoryRosterSource:
    """RosterSource backed by plain lists; used by the CSV loader and tests."""

    def __init__(
        self,
        officers: Iterable[Officer] = (),
        recurring: Iterable[RecurringAssignment] = (),
        exceptions: Iterable[ScheduleException] = (),
        requirements: Iterable[StaffingRequirement] = (),
        service_credits: Optional[Mapping[str, Union[SeniorityInput, float]]] = None,
    ):
        self.officers: Dict[str, Officer] = {o.id: o for o in officers}
        self.recurring: List[RecurringAssignment] = list(recurring)
        self.exceptions: List[ScheduleException] = list(exceptions)
        self.requirements: List[StaffingRequirement] = list(requirements)
        self.service_credits: Dict[str, Union[SeniorityInput, float]] = dict(service_credits or {})

    def __repr__(self):
        return (f"InMemoryRosterSource(officers={len(self.officers)}, recurring={len(self.recurring)}, "
                f"exceptions={len(self.exceptions)}, requirements={len(self.requirements)})")

    def fetch_recurring_assignments(
        self, shift_id: Optional[str], start: date, end: date
    ) -> List[RecurringAssignment]:
        return [
            r for r in self.recurring
            if (shift_id is None or r.shift_id == shift_id) and r.overlaps(start, end)
        ]

    def fetch_exceptions(self, shift_id: str, start: date, end: date) -> List[ScheduleException]:
        return [e for e in self.exceptions if e.shift_id == shift_id and start <= e.date <= end]

    def fetch_staffing_requirements(self, shift_id: str) -> List[StaffingRequirement]:
        return [r for r in self.requirements if r.shift_id == shift_id]

    def fetch_seniority_input(self, officer_id: str) -> Union[SeniorityInput, float, None]:
        if officer_id in self.service_credits:
            return self.service_credits[officer_id]
        officer = self.officers.get(officer_id)
        if officer is None:
            return None
        return SeniorityInput(
            hire_date=officer.hire_date,
            promotion_date_sergeant=officer.promotion_date_sergeant,
            promotion_date_lieutenant=officer.promotion_date_lieutenant,
            override=officer.service_credit_override,
        )

    def fetch_officers(self, officer_ids: Iterable[str]) -> Dict[str, Officer]:
        return {oid: self.officers[oid] for oid in officer_ids if oid in self.officers}

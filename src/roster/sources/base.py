"""Read-only queries the engine issues against the external roster store."""
from datetime import date
from typing import Dict, Iterable, List, Optional, Protocol, Union

from roster.models.officer import Officer
from roster.models.records import (
    RecurringAssignment,
    ScheduleException,
    SeniorityInput,
    StaffingRequirement,
)


class RosterSource(Protocol):
    """
    External roster store.

    Implementations raise RosterSourceError when a query cannot be served.
    """

    def fetch_recurring_assignments(
        self, shift_id: Optional[str], start: date, end: date
    ) -> List[RecurringAssignment]:
        """
        Patterns overlapping [start, end]: end_date null or >= start, and
        start_date null or <= end. shift_id=None returns every shift.
        """
        ...

    def fetch_exceptions(self, shift_id: str, start: date, end: date) -> List[ScheduleException]:
        ...

    def fetch_staffing_requirements(self, shift_id: str) -> List[StaffingRequirement]:
        ...

    def fetch_seniority_input(self, officer_id: str) -> Union[SeniorityInput, float, None]:
        """Raw fields, a precomputed service credit, or None when unknown."""
        ...

    def fetch_officers(self, officer_ids: Iterable[str]) -> Dict[str, Officer]:
        """Profiles for the requested ids; unknown ids may be omitted."""
        ...

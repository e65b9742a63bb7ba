"""Resolved assignment models."""
from dataclasses import dataclass
from datetime import date, time
from enum import Enum
from typing import Optional

from .rules import OFF_UNSPECIFIED_LABEL


class AssignmentKind(str, Enum):
    """Mutually exclusive classification of a resolved assignment."""
    REGULAR = "regular"
    TIME_OFF = "time_off"
    SPECIAL = "special_assignment"
    OVERTIME = "overtime"

    @classmethod
    def from_string(cls, s) -> Optional["AssignmentKind"]:
        """Parse a kind written by the store; blanks mean "not set"."""
        if s is None or isinstance(s, cls):
            return s
        key = str(s).strip().lower().replace("-", "_").replace(" ", "_")
        if not key or key in ("nan", "none"):
            return None
        mapping = {
            "regular": cls.REGULAR,
            "time_off": cls.TIME_OFF, "timeoff": cls.TIME_OFF, "pto": cls.TIME_OFF,
            "special": cls.SPECIAL, "special_assignment": cls.SPECIAL,
            "specialassignment": cls.SPECIAL,
            "overtime": cls.OVERTIME, "extra_shift": cls.OVERTIME, "ot": cls.OVERTIME,
        }
        if key not in mapping:
            raise ValueError(f"Unknown assignment kind: {s!r}")
        return mapping[key]


class ScheduleSource(str, Enum):
    RECURRING = "recurring"
    EXCEPTION = "exception"


class PTOType(str, Enum):
    VACATION = "vacation"
    HOLIDAY = "holiday"
    SICK = "sick"
    COMP = "comp"
    OTHER = "other"


class Anomaly(str, Enum):
    """Data problems that were recovered but should be surfaced to operators."""
    OFF_UNSPECIFIED = "off_unspecified"


@dataclass(frozen=True)
class PTODetail:
    """Time-off detail attached to a TimeOff assignment."""
    pto_type: PTOType
    reason: str
    is_full_shift: bool = True
    start_time: Optional[time] = None
    end_time: Optional[time] = None

    @property
    def label(self) -> str:
        """Display label; unmatched reasons keep their original text."""
        if self.pto_type is PTOType.OTHER:
            return self.reason or "Time Off"
        return self.pto_type.value.capitalize()


@dataclass(frozen=True)
class DailyAssignment:
    """One officer's effective assignment for one date on the queried shift."""
    officer_id: str
    date: date
    day_of_week: int
    shift_id: str
    source: ScheduleSource
    record_id: str
    is_regular_recurring_day: bool
    kind: AssignmentKind = AssignmentKind.REGULAR
    position: str = ""
    unit: str = ""
    notes: str = ""
    is_off: bool = False
    reason: str = ""
    pto: Optional[PTODetail] = None
    anomaly: Optional[Anomaly] = None
    custom_start_time: Optional[time] = None
    custom_end_time: Optional[time] = None
    is_extra_shift: bool = False
    partner_officer_id: Optional[str] = None
    declared_kind: Optional[AssignmentKind] = None

    @property
    def is_full_shift_time_off(self) -> bool:
        if self.kind is not AssignmentKind.TIME_OFF:
            return False
        return self.pto.is_full_shift if self.pto else True

    @property
    def counts_toward_coverage(self) -> bool:
        """Whether this assignment puts an officer on the street for the shift."""
        if self.is_full_shift_time_off:
            return False
        if self.kind is AssignmentKind.SPECIAL:
            return False
        return not self.is_off

    @property
    def label(self) -> str:
        """Text shown for this assignment in roster views."""
        if self.anomaly is Anomaly.OFF_UNSPECIFIED:
            return OFF_UNSPECIFIED_LABEL
        if self.pto is not None:
            return self.pto.label
        return self.position

    def to_dict(self) -> dict:
        return {
            "officer_id": self.officer_id,
            "date": self.date.isoformat(),
            "day_of_week": self.day_of_week,
            "shift_id": self.shift_id,
            "source": self.source.value,
            "record_id": self.record_id,
            "is_regular_recurring_day": self.is_regular_recurring_day,
            "kind": self.kind.value,
            "position": self.position,
            "unit": self.unit,
            "notes": self.notes,
            "is_off": self.is_off,
            "reason": self.reason,
            "pto_type": self.pto.pto_type.value if self.pto else None,
            "pto_label": self.pto.label if self.pto else None,
            "pto_full_shift": self.pto.is_full_shift if self.pto else None,
            "anomaly": self.anomaly.value if self.anomaly else None,
            "label": self.label,
            "is_extra_shift": self.is_extra_shift,
            "partner_officer_id": self.partner_officer_id,
        }

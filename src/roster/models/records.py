"""Raw records read from the roster store."""
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from roster.utils.logging_setup import get_logger

from .assignment import AssignmentKind
from .calendar import normalize_day, parse_date, parse_datetime, parse_time

logger = get_logger("roster.models.records")


def _text(value) -> str:
    if value is None:
        return ""
    text = str(value).strip()
    return "" if text.lower() == "nan" else text


def _flag(value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    return _text(value).lower() in ("1", "true", "yes", "y", "t")


def _int(value, default: int = 0) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def _optional(parse, value, field_name: str, record_id: str):
    """Parse an optional field; an unparsable value is logged and dropped."""
    try:
        return parse(value)
    except ValueError:
        logger.warning(f"Record {record_id!r}: ignoring unparsable {field_name} {value!r}")
        return None


@dataclass(frozen=True)
class RecurringAssignment:
    """A standing weekly pattern: officer works shift on weekday until end_date."""
    id: str
    officer_id: str
    shift_id: str
    day_of_week: int  # 0 = Sunday
    position: str = ""
    unit: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def applies_on(self, d: date) -> bool:
        """True when the pattern is in effect on date d (weekday is checked by the index)."""
        if self.start_date is not None and d < self.start_date:
            return False
        if self.end_date is not None and d > self.end_date:
            return False
        return True

    def overlaps(self, start: date, end: date) -> bool:
        if self.end_date is not None and self.end_date < start:
            return False
        if self.start_date is not None and self.start_date > end:
            return False
        return True

    @classmethod
    def from_dict(cls, d: dict) -> "RecurringAssignment":
        return cls(
            id=_text(d.get("id")),
            officer_id=_text(d.get("officer_id")),
            shift_id=_text(d.get("shift_id")),
            day_of_week=normalize_day(d.get("day_of_week")),
            position=_text(d.get("position") or d.get("position_name")),
            unit=_text(d.get("unit") or d.get("unit_number")),
            start_date=parse_date(d.get("start_date")),
            end_date=parse_date(d.get("end_date")),
        )


@dataclass(frozen=True)
class ScheduleException:
    """A one-off override of an officer's assignment on a single date."""
    id: str
    officer_id: str
    shift_id: str
    date: date
    is_off: bool = False
    reason: str = ""
    custom_start_time: Optional[time] = None
    custom_end_time: Optional[time] = None
    position: str = ""
    unit: str = ""
    notes: str = ""
    created_at: Optional[datetime] = None
    is_extra_shift: bool = False
    partner_officer_id: Optional[str] = None
    assignment_kind: Optional[AssignmentKind] = None

    @classmethod
    def from_dict(cls, d: dict) -> "ScheduleException":
        d_date = parse_date(d.get("date"))
        if d_date is None:
            raise ValueError(f"Exception {d.get('id')!r} has no date")
        record_id = _text(d.get("id"))
        return cls(
            id=record_id,
            officer_id=_text(d.get("officer_id")),
            shift_id=_text(d.get("shift_id")),
            date=d_date,
            is_off=_flag(d.get("is_off")),
            reason=_text(d.get("reason")),
            custom_start_time=_optional(parse_time, d.get("custom_start_time"), "custom_start_time", record_id),
            custom_end_time=_optional(parse_time, d.get("custom_end_time"), "custom_end_time", record_id),
            position=_text(d.get("position") or d.get("position_name")),
            unit=_text(d.get("unit") or d.get("unit_number")),
            notes=_text(d.get("notes")),
            created_at=_optional(parse_datetime, d.get("created_at"), "created_at", record_id),
            is_extra_shift=_flag(d.get("is_extra_shift")),
            partner_officer_id=_text(d.get("partner_officer_id")) or None,
            assignment_kind=AssignmentKind.from_string(d.get("assignment_kind")),
        )


@dataclass(frozen=True)
class StaffingRequirement:
    """Minimum staffing for one shift on one weekday."""
    shift_id: str
    day_of_week: int
    minimum_officers: int = 0
    minimum_supervisors: int = 0

    def __post_init__(self):
        object.__setattr__(self, "minimum_officers", max(0, int(self.minimum_officers or 0)))
        object.__setattr__(self, "minimum_supervisors", max(0, int(self.minimum_supervisors or 0)))

    @classmethod
    def from_dict(cls, d: dict) -> "StaffingRequirement":
        return cls(
            shift_id=_text(d.get("shift_id")),
            day_of_week=normalize_day(d.get("day_of_week")),
            minimum_officers=_int(d.get("minimum_officers")),
            minimum_supervisors=_int(d.get("minimum_supervisors")),
        )


@dataclass(frozen=True)
class SeniorityInput:
    """Raw fields for a local service-credit computation."""
    hire_date: Optional[date] = None
    promotion_date_sergeant: Optional[date] = None
    promotion_date_lieutenant: Optional[date] = None
    override: float = 0.0

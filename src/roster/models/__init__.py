# roster/models - Data models for the roster engine
from .assignment import (
    Anomaly,
    AssignmentKind,
    DailyAssignment,
    PTODetail,
    PTOType,
    ScheduleSource,
)
from .calendar import date_range, day_of_week, normalize_day
from .config import EngineConfig, PositionCategory
from .officer import Officer, RankClass
from .records import (
    RecurringAssignment,
    ScheduleException,
    SeniorityInput,
    StaffingRequirement,
)

__all__ = [
    "Officer", "RankClass",
    "RecurringAssignment", "ScheduleException", "StaffingRequirement", "SeniorityInput",
    "DailyAssignment", "AssignmentKind", "ScheduleSource", "PTODetail", "PTOType", "Anomaly",
    "EngineConfig", "PositionCategory",
    "day_of_week", "date_range", "normalize_day",
]

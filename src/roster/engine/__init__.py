# roster/engine - Schedule resolution pipeline
from .classifier import classify_assignment, classify_day, compute_primary_shifts, is_special_position, normalize_pto_type
from .merger import merge_schedule
from .ordering import CategorizedRoster, RankedOfficer, categorize_officers
from .resolver import (
    ResolutionCache,
    ScheduleResolution,
    ScheduleResolver,
    build_resolution,
    resolve_schedule,
)
from .seniority import SeniorityCache, compute_seniority, resolve_seniority
from .staffing import StaffingVerdict, evaluate_day, evaluate_staffing, is_understaffed

__all__ = [
    "merge_schedule",
    "classify_assignment",
    "classify_day",
    "compute_primary_shifts",
    "is_special_position",
    "normalize_pto_type",
    "compute_seniority",
    "resolve_seniority",
    "SeniorityCache",
    "categorize_officers",
    "CategorizedRoster",
    "RankedOfficer",
    "evaluate_day",
    "evaluate_staffing",
    "is_understaffed",
    "StaffingVerdict",
    "build_resolution",
    "resolve_schedule",
    "ScheduleResolution",
    "ScheduleResolver",
    "ResolutionCache",
]

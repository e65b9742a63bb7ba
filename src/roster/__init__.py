"""
Roster engine: resolves recurring patterns and dated exceptions into one
classified assignment per officer per day, orders the roster by seniority
and checks minimum staffing.

Usage:
    from roster import resolve_schedule
    from roster.sources import load_roster_directory

    source = load_roster_directory("data/")
    resolution = resolve_schedule(source, "day", date(2024, 1, 1), date(2024, 1, 7))
"""
from .engine import (
    ResolutionCache,
    ScheduleResolution,
    ScheduleResolver,
    build_resolution,
    resolve_schedule,
)
from .errors import ConfigError, RosterError, RosterSourceError
from .models import EngineConfig

__version__ = "0.1.0"

__all__ = [
    "resolve_schedule",
    "build_resolution",
    "ScheduleResolution",
    "ScheduleResolver",
    "ResolutionCache",
    "EngineConfig",
    "RosterError",
    "RosterSourceError",
    "ConfigError",
]

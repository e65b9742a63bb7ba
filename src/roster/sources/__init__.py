# roster/sources - Access to the external roster store
from .base import RosterSource
from .csv_loader import (
    load_exceptions,
    load_officers,
    load_recurring,
    load_requirements,
    load_roster_directory,
    load_service_credits,
)
from .memory import InMemoryRosterSource

__all__ = [
    "RosterSource",
    "InMemoryRosterSource",
    "load_roster_directory",
    "load_officers",
    "load_recurring",
    "load_exceptions",
    "load_requirements",
    "load_service_credits",
]

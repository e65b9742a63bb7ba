"""Pytest configuration and fixtures."""
import logging
import sys
from datetime import date
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from roster.models.assignment import AssignmentKind, DailyAssignment, ScheduleSource
from roster.models.calendar import day_of_week
from roster.models.officer import Officer
from roster.models.records import RecurringAssignment, ScheduleException, StaffingRequirement
from roster.sources.memory import InMemoryRosterSource


@pytest.fixture(autouse=True)
def reset_roster_logging():
    """Detach handlers that setup_logging attached during a test."""
    yield
    logger = logging.getLogger("roster")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


# 2024-01-01 is a Monday
MONDAY = date(2024, 1, 1)
AS_OF = date(2024, 1, 1)


def make_assignment(officer_id, d, kind=AssignmentKind.REGULAR, shift_id="day", **kwargs):
    """Classified assignment built directly, bypassing merge and classify."""
    fields = dict(
        officer_id=officer_id,
        date=d,
        day_of_week=day_of_week(d),
        shift_id=shift_id,
        source=ScheduleSource.RECURRING,
        record_id=f"r-{officer_id}-{d.isoformat()}",
        is_regular_recurring_day=True,
        kind=kind,
    )
    fields.update(kwargs)
    return DailyAssignment(**fields)


def weekday_patterns(officer_id, shift_id="day", position="District 1", days=(1, 2, 3, 4, 5)):
    return [
        RecurringAssignment(
            id=f"{officer_id}-{shift_id}-{dow}",
            officer_id=officer_id,
            shift_id=shift_id,
            day_of_week=dow,
            position=position,
        )
        for dow in days
    ]


@pytest.fixture
def sample_officers():
    """One of each class; Carol and Dan share a hire date."""
    return [
        Officer(id="lt1", name="Alice Adams", badge_number="101", rank="Lieutenant",
                hire_date=date(2005, 3, 1), promotion_date_lieutenant=date(2015, 6, 1)),
        Officer(id="sgt1", name="Bob Brown", badge_number="205", rank="Sergeant",
                hire_date=date(2008, 1, 1), promotion_date_sergeant=date(2012, 1, 1)),
        Officer(id="ofc1", name="Carol Chen", badge_number="310", rank="Officer",
                hire_date=date(2016, 1, 1)),
        Officer(id="ofc2", name="Dan Diaz", badge_number="N/A", rank="Officer",
                hire_date=date(2016, 1, 1)),
        Officer(id="ppo1", name="Eve Evans", badge_number="420", rank="Probationary",
                hire_date=date(2023, 7, 1)),
    ]


@pytest.fixture
def sample_recurring(sample_officers):
    """Everyone works the day shift Monday to Friday."""
    patterns = []
    for officer in sample_officers:
        position = "Supervisor" if officer.rank_class.is_supervisor else "District 1"
        patterns.extend(weekday_patterns(officer.id, position=position))
    return patterns


@pytest.fixture
def sample_requirements():
    return [
        StaffingRequirement(shift_id="day", day_of_week=dow, minimum_officers=2, minimum_supervisors=1)
        for dow in range(7)
    ]


@pytest.fixture
def vacation_exception():
    return ScheduleException(
        id="exc-vac",
        officer_id="ofc1",
        shift_id="day",
        date=date(2024, 1, 8),
        is_off=True,
        reason="Vacation",
    )


@pytest.fixture
def sample_source(sample_officers, sample_recurring, sample_requirements, vacation_exception):
    return InMemoryRosterSource(
        officers=sample_officers,
        recurring=sample_recurring,
        exceptions=[vacation_exception],
        requirements=sample_requirements,
    )


@pytest.fixture
def roster_dir(tmp_path):
    """CSV data directory in the layout load_roster_directory expects."""
    (tmp_path / "officers.csv").write_text(
        "id,name,badge_number,rank,hire_date,promotion_date_sergeant,promotion_date_lieutenant,service_credit_override\n"
        "lt1,Alice Adams,101,Lieutenant,2005-03-01,,2015-06-01,\n"
        "sgt1,Bob Brown,205,Sergeant,2008-01-01,2012-01-01,,\n"
        "ofc1,Carol Chen,0042,Officer,2016-01-01,,,\n"
        "ppo1,Eve Evans,420,PPO,2023-07-01,,,\n",
        encoding="utf-8",
    )
    (tmp_path / "recurring.csv").write_text(
        "id,officer_id,shift_id,day_of_week,position,unit,start_date,end_date\n"
        "r1,lt1,day,Monday,Supervisor,1,,\n"
        "r2,sgt1,day,1,Supervisor,2,,\n"
        "r3,ofc1,day,1,District 1,10,,\n"
        "r4,ppo1,day,1,District 2,11,,\n"
        "r5,ofc1,day,2,District 1,10,,\n",
        encoding="utf-8",
    )
    (tmp_path / "exceptions.csv").write_text(
        "id,officer_id,shift_id,date,is_off,reason,custom_start_time,custom_end_time,position,unit,notes,created_at\n"
        "e1,ofc1,day,2024-01-08,true,Vacation,,,,,,2023-12-01T10:00:00\n",
        encoding="utf-8",
    )
    (tmp_path / "staffing.csv").write_text(
        "shift_id,day_of_week,minimum_officers,minimum_supervisors\n"
        "day,1,2,1\n"
        "day,2,1,1\n",
        encoding="utf-8",
    )
    return tmp_path

"""Tests for data models."""
from datetime import date, datetime, time

import pytest

from conftest import MONDAY, make_assignment
from roster.models.assignment import AssignmentKind, PTODetail, PTOType
from roster.models.calendar import date_range, day_of_week, normalize_day, parse_date
from roster.models.officer import Officer, RankClass
from roster.models.records import RecurringAssignment, ScheduleException, StaffingRequirement


class TestRankClass:
    """Tests for rank parsing."""

    @pytest.mark.parametrize("rank,expected", [
        ("Sergeant", RankClass.SERGEANT),
        ("Sgt.", RankClass.SERGEANT),
        ("Lieutenant", RankClass.LIEUTENANT),
        ("LT", RankClass.LIEUTENANT),
        ("Captain", RankClass.CAPTAIN),
        ("Capt.", RankClass.CAPTAIN),
        ("Chief", RankClass.CHIEF),
        ("Deputy Chief", RankClass.CHIEF),
        ("Probationary", RankClass.PROBATIONARY),
        ("PPO", RankClass.PROBATIONARY),
        ("Patrol Officer", RankClass.OFFICER),
        ("", RankClass.OFFICER),
        (None, RankClass.OFFICER),
    ])
    def test_from_rank(self, rank, expected):
        assert RankClass.from_rank(rank) is expected

    def test_abbreviation_matches_whole_words_only(self):
        """"Salt" contains "lt" but is not a lieutenant."""
        assert RankClass.from_rank("Salt Patrol") is RankClass.OFFICER

    def test_supervisor_classes(self):
        assert RankClass.SERGEANT.is_supervisor
        assert RankClass.CHIEF.is_supervisor
        assert not RankClass.PROBATIONARY.is_supervisor
        assert RankClass.LIEUTENANT.is_command
        assert not RankClass.SERGEANT.is_command


class TestOfficer:
    """Tests for Officer profile."""

    def test_placeholders_for_blank_fields(self):
        officer = Officer(id="x", name="", badge_number=None, rank="  ")

        assert officer.name == "Unknown"
        assert officer.badge_number == "9999"
        assert officer.rank == "Officer"
        assert officer.rank_class is RankClass.OFFICER

    def test_last_name(self):
        assert Officer(id="1", name="Mary Ann  Smith").last_name == "Smith"

    @pytest.mark.parametrize("rank,abbr", [
        ("Sergeant", "Sgt"),
        ("Lieutenant", "LT"),
        ("Captain", "CPT"),
        ("Deputy Chief", "DC"),
        ("Chief", "CHIEF"),
        ("PPO", "PPO"),
        ("Officer", "Ofc"),
    ])
    def test_rank_abbreviation(self, rank, abbr):
        assert Officer(id="1", rank=rank).rank_abbreviation == abbr

    def test_from_dict(self):
        officer = Officer.from_dict({
            "id": 7,
            "full_name": "Jo Park",
            "badge_number": "0042",
            "rank": "Sergeant",
            "hire_date": "2010-05-01",
            "promotion_date_sergeant": "2018-02-01",
            "service_credit_override": "not a number",
        })

        assert officer.id == "7"
        assert officer.name == "Jo Park"
        assert officer.badge_number == "0042"
        assert officer.promotion_date_sergeant == date(2018, 2, 1)
        assert officer.service_credit_override == 0.0

    def test_to_dict_from_dict(self):
        officer = Officer(id="1", name="A B", badge_number="5", rank="LT",
                          hire_date=date(2000, 1, 1), promotion_date_lieutenant=date(2010, 1, 1))
        assert Officer.from_dict(officer.to_dict()) == officer


class TestCalendar:
    """Tests for day-of-week convention."""

    def test_sunday_is_zero(self):
        assert day_of_week(date(2024, 1, 7)) == 0
        assert day_of_week(MONDAY) == 1
        assert day_of_week(date(2024, 1, 6)) == 6

    @pytest.mark.parametrize("value,expected", [
        (0, 0), (6, 6), (1.0, 1), ("3", 3), ("Sun", 0), ("saturday", 6), (" Thurs ", 4),
    ])
    def test_normalize_day(self, value, expected):
        assert normalize_day(value) == expected

    @pytest.mark.parametrize("value", [7, -1, "Funday", 2.5])
    def test_normalize_day_invalid(self, value):
        with pytest.raises(ValueError):
            normalize_day(value)

    def test_date_range_inclusive(self):
        days = list(date_range(date(2024, 1, 30), date(2024, 2, 2)))
        assert days == [date(2024, 1, 30), date(2024, 1, 31), date(2024, 2, 1), date(2024, 2, 2)]

    def test_parse_date_blanks(self):
        assert parse_date("") is None
        assert parse_date("nan") is None
        assert parse_date("2024-01-05T09:00:00") == date(2024, 1, 5)


class TestRecords:
    """Tests for raw store records."""

    def test_recurring_applies_within_bounds(self):
        pattern = RecurringAssignment(id="r", officer_id="o", shift_id="s", day_of_week=1,
                                      start_date=date(2024, 1, 8), end_date=date(2024, 1, 22))
        assert not pattern.applies_on(date(2024, 1, 1))
        assert pattern.applies_on(date(2024, 1, 8))
        assert pattern.applies_on(date(2024, 1, 22))
        assert not pattern.applies_on(date(2024, 1, 29))

    def test_recurring_overlaps(self):
        pattern = RecurringAssignment(id="r", officer_id="o", shift_id="s", day_of_week=1,
                                      end_date=date(2024, 1, 1))
        assert pattern.overlaps(date(2023, 12, 25), date(2024, 1, 7))
        assert not pattern.overlaps(date(2024, 1, 2), date(2024, 1, 7))

    def test_exception_from_dict(self):
        exc = ScheduleException.from_dict({
            "id": "e1",
            "officer_id": "o1",
            "shift_id": "day",
            "date": "2024-01-02",
            "is_off": "TRUE",
            "reason": " Sick ",
            "custom_start_time": "08:00",
            "created_at": "2024-01-01T08:30:00",
            "assignment_kind": "overtime",
        })

        assert exc.is_off is True
        assert exc.reason == "Sick"
        assert exc.custom_start_time == time(8, 0)
        assert exc.custom_end_time is None
        assert exc.created_at == datetime(2024, 1, 1, 8, 30)
        assert exc.assignment_kind is AssignmentKind.OVERTIME
        assert exc.partner_officer_id is None

    def test_exception_without_date_rejected(self):
        with pytest.raises(ValueError):
            ScheduleException.from_dict({"id": "e1", "officer_id": "o1", "shift_id": "day", "date": ""})

    def test_staffing_minimums_clamped(self):
        req = StaffingRequirement(shift_id="s", day_of_week=2, minimum_officers=-3, minimum_supervisors=None)
        assert req.minimum_officers == 0
        assert req.minimum_supervisors == 0


class TestAssignment:
    """Tests for resolved assignment helpers."""

    @pytest.mark.parametrize("text,expected", [
        ("Time Off", AssignmentKind.TIME_OFF),
        ("special-assignment", AssignmentKind.SPECIAL),
        ("OT", AssignmentKind.OVERTIME),
        ("", None),
        (None, None),
    ])
    def test_kind_from_string(self, text, expected):
        assert AssignmentKind.from_string(text) is expected

    def test_kind_from_string_unknown(self):
        with pytest.raises(ValueError):
            AssignmentKind.from_string("vacationing")

    def test_pto_label(self):
        assert PTODetail(PTOType.VACATION, "vac").label == "Vacation"
        assert PTODetail(PTOType.OTHER, "Bereavement").label == "Bereavement"
        assert PTODetail(PTOType.OTHER, "").label == "Time Off"

    def test_coverage_rules(self):
        full_pto = make_assignment("o", MONDAY, AssignmentKind.TIME_OFF, is_off=True,
                                   pto=PTODetail(PTOType.SICK, "Sick"))
        partial_pto = make_assignment("o", MONDAY, AssignmentKind.TIME_OFF,
                                      pto=PTODetail(PTOType.COMP, "comp", is_full_shift=False,
                                                    start_time=time(8), end_time=time(10)))
        special = make_assignment("o", MONDAY, AssignmentKind.SPECIAL)
        overtime = make_assignment("o", MONDAY, AssignmentKind.OVERTIME)

        assert not full_pto.counts_toward_coverage
        assert partial_pto.counts_toward_coverage
        assert not special.counts_toward_coverage
        assert overtime.counts_toward_coverage

    def test_to_dict(self):
        a = make_assignment("o", MONDAY, AssignmentKind.OVERTIME, position="Desk")
        d = a.to_dict()
        assert d["kind"] == "overtime"
        assert d["date"] == "2024-01-01"
        assert d["pto_type"] is None
